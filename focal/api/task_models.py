"""Request/response models for task and planner endpoints."""

from datetime import date, datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field

from focal.models.constants import DEFAULT_DURATION_MINUTES, MAX_ENERGY_LEVEL, MIN_ENERGY_LEVEL
from focal.models.occurrence import Occurrence
from focal.models.recurrence import RecurrenceRule, describe, parse_recurrence
from focal.models.task import TaskTemplate


class TaskTemplateRequest(BaseModel):
    """Request model for creating or replacing a task template.

    Recurrence is given either as a ``recurrence`` object (``{"kind": "custom", "weekdays": [1, 3]}``)
    or, for older clients, as ``recurrence_option`` + ``repeat_days``.
    """
    title: str = Field(..., min_length=1, description="Task title")
    anchor_start: datetime = Field(..., description="Start of the first occurrence")
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, ge=0, description="Duration of each occurrence")
    recurrence: Optional[RecurrenceRule] = Field(None, description="Recurrence rule")
    recurrence_option: Optional[str] = Field(None, description="Legacy recurrence label, e.g. 'Weekly'")
    repeat_days: List[int] = Field(default_factory=list, description="Legacy weekday list for 'Custom'")
    icon: Optional[str] = None
    color_name: Optional[str] = None
    energy_level: Optional[int] = Field(None, ge=MIN_ENERGY_LEVEL, le=MAX_ENERGY_LEVEL)
    notes: Optional[str] = None
    subtasks: List[str] = Field(default_factory=list, description="Initial subtask titles (ignored on replace)")

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    def resolve_recurrence(self) -> RecurrenceRule:
        if self.recurrence is not None:
            return self.recurrence
        return parse_recurrence(self.recurrence_option, self.repeat_days)


class TaskResponse(BaseModel):
    """Response model for a single template."""
    task: TaskTemplate
    duration_minutes: int
    recurrence_summary: str
    subtasks_progress: float

    @classmethod
    def from_template(cls, template: TaskTemplate) -> "TaskResponse":
        return cls(
            task=template,
            duration_minutes=int(template.duration.total_seconds() // 60),
            recurrence_summary=describe(template.recurrence),
            subtasks_progress=template.subtasks_progress,
        )


class SubtaskRequest(BaseModel):
    title: str = Field(..., min_length=1, description="Subtask title")


class MoveTaskRequest(BaseModel):
    """Request model for moving a template's anchor to another day."""
    day: date = Field(..., description="New anchor day")
    hour: Optional[int] = Field(None, ge=0, le=23, description="New hour (keeps the current one when omitted)")
    minute: Optional[int] = Field(None, ge=0, le=59, description="New minute (keeps the current one when omitted)")


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]


class OccurrenceListResponse(BaseModel):
    """Response model for a materialized range."""
    template_id: str
    start: date
    end: date
    count: int
    occurrences: List[Occurrence]


class NextOccurrenceResponse(BaseModel):
    template_id: str
    after: date
    next_occurrence: Optional[date]


class RRuleResponse(BaseModel):
    template_id: str
    rrule: str


class DayPlanResponse(BaseModel):
    """Response model for one planner day."""
    day: date
    progress: float
    instances: List[Occurrence]


class WeekPlanResponse(BaseModel):
    """Response model for one planner week."""
    week_start: date
    progress: float
    days: List[DayPlanResponse]
