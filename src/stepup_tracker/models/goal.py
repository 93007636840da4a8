"""Weekly goal data models."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .workout import to_int


class WeeklyGoal(BaseModel):
    """Targets for one week; the most recently appended goal is current."""

    model_config = ConfigDict(populate_by_name=True)

    week_start: str = Field(alias="weekStart")
    target_steps: int = Field(default=0, alias="targetSteps")
    target_calories: int = Field(default=0, alias="targetCalories")
    target_minutes: int = Field(default=0, alias="targetMinutes")
    target_workouts: int = Field(default=0, alias="targetWorkouts")

    @field_validator(
        "target_steps", "target_calories", "target_minutes", "target_workouts",
        mode="before",
    )
    @classmethod
    def _coerce_targets(cls, val):
        return to_int(val)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
