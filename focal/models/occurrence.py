"""Occurrence (virtual task instance) model for Focal."""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from focal.models.subtask import Subtask


class Occurrence(BaseModel):
    """One displayable instance of a task template.

    Virtual occurrences get a fresh id on every materialization; the single instance of a
    non-recurring template reuses the template id.
    """

    id: str = Field(..., description="Instance identifier (not stable across materializations)")
    source_template_id: str = Field(..., description="ID of the template this instance was built from")
    title: str = Field(..., description="Template title at materialization time")
    occurrence_date: date = Field(..., description="Calendar day this instance falls on")
    start_time: datetime = Field(..., description="Occurrence day combined with the anchor's time of day")
    end_time: datetime = Field(..., description="start_time plus the template duration")
    is_virtual: bool = Field(True, description="True for generated recurrence instances")
    is_completed: bool = Field(False, description="Completion state for this occurrence")
    completed_at: Optional[datetime] = Field(None, description="When this occurrence was completed")
    subtasks: List[Subtask] = Field(default_factory=list, description="The template's subtasks")
    completed_subtasks_count: int = Field(0, description="Checked subtasks")
    subtasks_progress: float = Field(0.0, description="Fraction of checked subtasks")
