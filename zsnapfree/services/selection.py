"""Selection model: the snapshot list, its marks, cursor and staleness flag."""

from typing import Iterable, List, Optional

from zsnapfree.models import SnapRange, SnapshotItem
from zsnapfree.services.range_compressor import RangeCompressor


class SelectionModel:
    """Ordered snapshots with per-item marks and a cursor."""

    def __init__(self, names: Iterable[str]):
        """
        Initialize the model with every snapshot unmarked.

        Args:
            names: Snapshot names in listing order
        """
        self.items: List[SnapshotItem] = [SnapshotItem(name=name) for name in names]
        self.cursor: Optional[int] = 0 if self.items else None
        self.dirty = False

    @property
    def current(self) -> Optional[SnapshotItem]:
        """The item under the cursor, if any."""
        if self.cursor is None:
            return None
        return self.items[self.cursor]

    @property
    def marked_count(self) -> int:
        return sum(1 for item in self.items if item.marked)

    def move_first(self) -> None:
        if self.items:
            self.cursor = 0

    def move_last(self) -> None:
        if self.items:
            self.cursor = len(self.items) - 1

    def move_previous(self) -> None:
        if self.cursor is not None:
            self.cursor = max(self.cursor - 1, 0)

    def move_next(self) -> None:
        if self.cursor is not None:
            self.cursor = min(self.cursor + 1, len(self.items) - 1)

    def toggle_current(self) -> None:
        """
        Flip the mark under the cursor and advance to the next item.

        Always marks the estimate stale, even if this toggle undoes an
        earlier one.
        """
        item = self.current
        if item is None:
            return
        item.marked = not item.marked
        self.dirty = True
        self.move_next()

    def ranges(self) -> List[SnapRange]:
        """Compress the current marks into destroy ranges."""
        return RangeCompressor.compress(self.items)
