"""Adapter for the external zfs command-line tool."""

import re
import shlex
import subprocess
from typing import List, Sequence

from zsnapfree.errors import (
    IncompleteOutputError,
    MalformedOutputError,
    ZfsCommandError,
    ZfsOutputError,
)
from zsnapfree.logging_config import get_logger
from zsnapfree.models import ReclaimResult, SnapRange
from zsnapfree.services.range_compressor import RangeCompressor

logger = get_logger(__name__)

DESTROY_PREFIX = "destroy\t"
RECLAIM_PREFIX = "reclaim\t"

_BYTES_PATTERN = re.compile(r"[0-9]+")


def parse_snapshot_list(dataset: str, stdout: str) -> List[str]:
    """
    Parse ``zfs list -Ht snapshot <dataset>`` output.

    Args:
        dataset: Dataset the listing was requested for
        stdout: Captured standard output

    Returns:
        Bare snapshot names in listing order

    Raises:
        ZfsOutputError: If a line has no tab or names a snapshot of another dataset
    """
    prefix = f"{dataset}@"
    names: List[str] = []
    for line in stdout.splitlines():
        full_name, sep, _ = line.partition("\t")
        if not sep:
            raise ZfsOutputError(f"Unexpected zfs output line: {line!r}", stdout)
        if not full_name.startswith(prefix):
            raise ZfsOutputError(
                f"Invalid snapshot name {full_name!r}, expected {prefix}...", stdout
            )
        names.append(full_name[len(prefix) :])
    return names


def parse_destroy_dry_run(destroy_spec: str, stdout: str) -> ReclaimResult:
    """
    Parse ``zfs destroy -np`` output into a ReclaimResult.

    Reading stops at the first ``reclaim`` line; anything after it is ignored.
    Lines that are neither ``destroy`` nor ``reclaim`` are skipped.

    Args:
        destroy_spec: The ``<dataset>@<selector>`` that was dry-run, for messages
        stdout: Captured standard output

    Returns:
        The snapshots that would be destroyed and the reclaimable bytes

    Raises:
        MalformedOutputError: If the reclaim byte count is not a non-negative integer
        IncompleteOutputError: If there is no reclaim line
    """
    destroys: List[str] = []
    for line in stdout.splitlines():
        if line.startswith(RECLAIM_PREFIX):
            value = line[len(RECLAIM_PREFIX) :]
            if not _BYTES_PATTERN.fullmatch(value):
                raise MalformedOutputError(
                    f"Unexpected reclaim value {value!r} for zfs destroy -np {destroy_spec}",
                    stdout,
                )
            return ReclaimResult(destroys=destroys, bytes=int(value))
        if line.startswith(DESTROY_PREFIX):
            destroys.append(line[len(DESTROY_PREFIX) :])

    raise IncompleteOutputError(
        f"Unexpected output for zfs destroy -np {destroy_spec} - missing 'reclaim' line.",
        stdout,
    )


def equivalent_command_line(dataset: str, ranges: Sequence[SnapRange]) -> str:
    """
    Build the ``zfs destroy -nv`` command an operator can re-run by hand.

    The command keeps ``-n`` so running it is still a dry run.
    """
    target = f"{dataset}@{RangeCompressor.to_selector(ranges)}"
    return f"zfs destroy -nv {shlex.quote(target)}"


class ZfsToolAdapter:
    """Runs the zfs tool; the only component that invokes it."""

    def __init__(self, zfs: str = "zfs"):
        """
        Initialize the adapter.

        Args:
            zfs: Binary to run, either a name on PATH or a path
        """
        self.zfs = zfs

    def _run(self, args: Sequence[str], failure_message: str) -> str:
        command = [self.zfs, *args]
        logger.debug(f"Running {shlex.join(command)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            logger.error(f"Failed to run {shlex.join(command)}: {e}")
            raise ZfsCommandError(
                f"Failed to run zfs {list(args)}: {e}", command
            ) from e

        if completed.returncode != 0:
            logger.warning(
                f"{shlex.join(command)} exited with status {completed.returncode}"
            )
            stderr = completed.stderr.decode("utf-8", errors="replace")
            raise ZfsCommandError(failure_message, command, stderr)

        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"{shlex.join(command)} produced output that is not UTF-8: {e}")
            raise ZfsOutputError(
                f"Unexpected zfs output from {shlex.join(command)}: {e}",
                completed.stdout.decode("utf-8", errors="replace"),
            ) from e

    def list_snapshots(self, dataset: str) -> List[str]:
        """
        List the snapshots of a dataset in creation order.

        Args:
            dataset: Dataset name, e.g. ``tank/data``

        Returns:
            Snapshot names without the ``<dataset>@`` prefix

        Raises:
            ZfsCommandError: If zfs cannot be run or exits non-zero
            ZfsOutputError: If the listing does not look like snapshots of dataset
        """
        stdout = self._run(
            ["list", "-Ht", "snapshot", dataset],
            f"Failed to fetch snapshots for {dataset}",
        )
        names = parse_snapshot_list(dataset, stdout)
        logger.info(f"Found {len(names)} snapshots for {dataset}")
        return names

    def estimate_reclaim(self, dataset: str, ranges: Sequence[SnapRange]) -> ReclaimResult:
        """
        Dry-run destroying the given ranges and return zfs's reclaim estimate.

        Never runs a real destroy: the command always carries ``-n``.

        Args:
            dataset: Dataset name
            ranges: Non-empty ranges to destroy

        Returns:
            ReclaimResult for exactly these ranges

        Raises:
            ValueError: If ranges is empty
            ZfsCommandError: If zfs cannot be run or exits non-zero
            ZfsOutputError: If the dry-run output is incomplete or malformed
        """
        if not ranges:
            raise ValueError("estimate_reclaim requires at least one snapshot range")

        destroy_spec = f"{dataset}@{RangeCompressor.to_selector(ranges)}"
        stdout = self._run(
            ["destroy", "-np", destroy_spec],
            f"Failed to dry-run destroy {destroy_spec}",
        )
        result = parse_destroy_dry_run(destroy_spec, stdout)
        logger.debug(
            f"Dry-run of {destroy_spec}: {len(result.destroys)} destroys, {result.bytes} bytes"
        )
        return result
