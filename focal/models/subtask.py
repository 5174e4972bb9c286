"""Subtask model for Focal."""

import uuid
from datetime import datetime
from pydantic import BaseModel, Field


class Subtask(BaseModel):
    """A checklist item owned by a task template.

    Subtasks belong to the template, so every occurrence of a recurring template shows
    the same list.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique subtask identifier (UUID v4)")
    title: str = Field(..., min_length=1, description="Subtask title")
    is_completed: bool = Field(False, description="Checked off")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
