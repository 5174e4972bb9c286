"""Task template data model for Focal."""

from datetime import datetime, timedelta
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from focal.models.recurrence import NoRecurrence, RecurrenceRule
from focal.models.subtask import Subtask


class TaskTemplate(BaseModel):
    """Canonical task definition.

    For recurring templates this is the source every occurrence is generated from;
    ``anchor_start`` marks the first occurrence and the time of day all occurrences inherit.
    """

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title")
    icon: str = Field("📝", description="Display icon")
    color_name: str = Field("sage", description="Display color name")
    anchor_start: datetime = Field(..., description="Start of the first occurrence")
    duration: timedelta = Field(timedelta(hours=1), description="Elapsed time of each occurrence")
    recurrence: RecurrenceRule = Field(default_factory=NoRecurrence, description="Recurrence rule")
    energy_level: int = Field(2, ge=0, le=4, description="Energy needed (0 restful .. 4 intense)")
    notes: Optional[str] = Field(None, description="Task notes")
    subtasks: List[Subtask] = Field(default_factory=list, description="Checklist items, in display order")
    is_completed: bool = Field(False, description="Completion flag (non-recurring templates only)")
    completed_at: Optional[datetime] = Field(None, description="When the template was completed")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_validator("duration")
    @classmethod
    def _validate_duration(cls, v):
        if v < timedelta(0):
            raise ValueError("duration must not be negative")
        return v

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring

    @property
    def end_time(self) -> datetime:
        return self.anchor_start + self.duration

    @property
    def completed_subtasks_count(self) -> int:
        return sum(1 for s in self.subtasks if s.is_completed)

    @property
    def subtasks_progress(self) -> float:
        """Fraction of checked subtasks (0.0 when there are none)."""
        if not self.subtasks:
            return 0.0
        return self.completed_subtasks_count / len(self.subtasks)
