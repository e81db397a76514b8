"""Business logic services."""

from zsnapfree.services.range_compressor import RangeCompressor
from zsnapfree.services.recompute_loop import Action, RecomputeLoop
from zsnapfree.services.selection import SelectionModel
from zsnapfree.services.zfs_tool import ZfsToolAdapter

__all__ = [
    "Action",
    "RangeCompressor",
    "RecomputeLoop",
    "SelectionModel",
    "ZfsToolAdapter",
]
