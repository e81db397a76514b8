"""ReclaimResult model holding a dry-run reclaim estimate."""

from typing import List

from pydantic import BaseModel, Field


class ReclaimResult(BaseModel):
    """What a dry-run destroy reports it would remove, and the space it would free."""

    destroys: List[str] = Field(
        default_factory=list,
        description="Fully-qualified snapshots the dry run would destroy, in output order",
    )
    bytes: int = Field(default=0, ge=0, description="Estimated reclaimable space in bytes")

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "destroys": ["tank/data@snap1", "tank/data@snap2"],
                "bytes": 12345,
            }
        }
