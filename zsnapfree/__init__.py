"""zsnapfree - see how much space freeing ZFS snapshots would reclaim."""

__version__ = "0.1.0"
