"""Core data models for zsnapfree."""

from zsnapfree.models.reclaim import ReclaimResult
from zsnapfree.models.snapshot import SnapshotItem
from zsnapfree.models.snap_range import SnapRange, SnapRangeKind

__all__ = ["ReclaimResult", "SnapshotItem", "SnapRange", "SnapRangeKind"]
