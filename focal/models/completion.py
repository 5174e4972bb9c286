"""Completion record model for Focal."""

import uuid
from datetime import date, datetime
from pydantic import BaseModel, Field


class CompletionRecord(BaseModel):
    """Marks one occurrence of a recurring template as done.

    ``template_id`` is a weak reference (lookup by id only). ``occurrence_date`` is
    day-granular; the time the user pressed "done" lives in ``completed_at``.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique record identifier (UUID v4)")
    template_id: str = Field(..., description="ID of the task template this completion belongs to")
    occurrence_date: date = Field(..., description="Calendar day of the completed occurrence")
    completed_at: datetime = Field(default_factory=datetime.utcnow, description="When the occurrence was marked done")
