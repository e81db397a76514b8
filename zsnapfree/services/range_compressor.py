"""Service for compressing marked snapshots into zfs destroy selectors."""

from itertools import groupby
from typing import Iterable, List, Sequence

from zsnapfree.models import SnapRange, SnapshotItem


class RangeCompressor:
    """Turns a marked/unmarked snapshot sequence into the fewest inclusive ranges."""

    @staticmethod
    def compress(items: Iterable[SnapshotItem]) -> List[SnapRange]:
        """
        Compress marked snapshots into contiguous ranges.

        Consecutive items with the same mark state form a run; unmarked runs
        only separate marked ones and are never named in the result.

        Args:
            items: Snapshots in listing order

        Returns:
            Ordered ranges covering exactly the marked snapshots
        """
        ranges: List[SnapRange] = []
        for marked, group in groupby(items, key=lambda item: item.marked):
            if not marked:
                continue
            run = list(group)
            if len(run) == 1:
                ranges.append(SnapRange.single(run[0].name))
            else:
                ranges.append(SnapRange.range(run[0].name, run[-1].name))
        return ranges

    @staticmethod
    def to_selector(ranges: Sequence[SnapRange]) -> str:
        """
        Render ranges in zfs's snapshot selector syntax.

        Args:
            ranges: Ranges as produced by compress()

        Returns:
            Comma-separated selector, e.g. ``snap1,snap3%snap7``
        """
        return ",".join(str(snap_range) for snap_range in ranges)
