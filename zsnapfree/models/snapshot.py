"""SnapshotItem model representing one listed snapshot and its mark state."""

from pydantic import BaseModel, Field


class SnapshotItem(BaseModel):
    """A snapshot of the target dataset, in the tool's listing order."""

    name: str = Field(..., description="Snapshot name without the '<dataset>@' prefix")
    marked: bool = Field(default=False, description="Whether the snapshot is marked for deletion")

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "name": "zfs-auto-snap_monthly-2023-09-01-0552",
                "marked": True,
            }
        }
