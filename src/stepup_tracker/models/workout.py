"""Workout data models."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_int(val: Any) -> int:
    """Coerce stored numbers to int; blanks and non-numeric strings become 0."""
    if val is None or val == "":
        return 0
    try:
        return int(float(val))
    except (TypeError, ValueError):
        return 0


class Intensity(str, Enum):
    """Perceived intensity of a workout."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    EXTREME = "Extreme"
    REST = "Rest"


class Workout(BaseModel):
    """A single logged workout (or rest entry) for one calendar day."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str
    date: str
    type: Optional[str] = None
    duration: int = Field(default=0, ge=0)
    calories: int = Field(default=0, ge=0)
    steps: Optional[int] = Field(default=None, ge=0)
    intensity: Optional[Intensity] = None
    notes: str = ""
    is_rest_day: bool = Field(default=False, alias="isRestDay")

    @field_validator("duration", "calories", mode="before")
    @classmethod
    def _coerce_required(cls, val):
        return to_int(val)

    @field_validator("steps", mode="before")
    @classmethod
    def _coerce_steps(cls, val):
        if val is None:
            return None
        return to_int(val)

    @field_validator("notes", mode="before")
    @classmethod
    def _coerce_notes(cls, val):
        return val or ""

    def to_document(self) -> dict:
        """Convert to the camelCase JSON shape kept in the store."""
        return self.model_dump(by_alias=True, exclude_none=True)
