"""SnapRange model describing a contiguous run of marked snapshots."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class SnapRangeKind(str, Enum):
    """Shape of a snapshot range."""

    SINGLE = "single"
    RANGE = "range"


class SnapRange(BaseModel):
    """
    Either a single snapshot or an inclusive run of two or more snapshots.

    A single snapshot has ``first == last``. Build instances with
    :meth:`single` and :meth:`range` rather than the constructor.
    """

    kind: SnapRangeKind = Field(..., description="Single snapshot or inclusive range")
    first: str = Field(..., description="First snapshot name of the run")
    last: str = Field(..., description="Last snapshot name of the run")

    @model_validator(mode="after")
    def validate_bounds(self) -> "SnapRange":
        """A single range must name the same snapshot at both ends."""
        if self.kind == SnapRangeKind.SINGLE and self.first != self.last:
            raise ValueError(
                f"single snapshot range must have first == last, got {self.first!r}, {self.last!r}"
            )
        return self

    @classmethod
    def single(cls, name: str) -> "SnapRange":
        """Create a range covering exactly one snapshot."""
        return cls(kind=SnapRangeKind.SINGLE, first=name, last=name)

    @classmethod
    def range(cls, first: str, last: str) -> "SnapRange":
        """Create an inclusive range from ``first`` to ``last``."""
        return cls(kind=SnapRangeKind.RANGE, first=first, last=last)

    def __str__(self) -> str:
        if self.kind == SnapRangeKind.SINGLE:
            return self.first
        return f"{self.first}%{self.last}"

    class Config:
        """Pydantic configuration."""

        frozen = True
