"""FastAPI dependencies shared by the Focal endpoints."""

import os
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from focal.database.completion_record_repository import CompletionRecordRepository
from focal.database.database import get_db
from focal.database.task_template_repository import TaskTemplateRepository
from focal.models.constants import DEFAULT_TIME_ZONE
from focal.models.task import TaskTemplate
from focal.recurrence.calendar import CalendarContext


def get_calendar(
    tz: Optional[str] = Query(None, description="IANA time zone (defaults to FOCAL_TIME_ZONE)"),
) -> CalendarContext:
    """Calendar context for the request.

    Raises:
        HTTPException: 400 if the time zone is unknown
    """
    name = tz or os.getenv("FOCAL_TIME_ZONE", DEFAULT_TIME_ZONE)
    try:
        return CalendarContext.from_name(name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def get_template_repository(db: Session = Depends(get_db)) -> TaskTemplateRepository:
    return TaskTemplateRepository(db)


def get_completion_repository(db: Session = Depends(get_db)) -> CompletionRecordRepository:
    return CompletionRecordRepository(db)


def get_template_or_404(
    template_id: str,
    templates: TaskTemplateRepository = Depends(get_template_repository),
) -> TaskTemplate:
    """Load the template named in the path.

    Raises:
        HTTPException: 404 if it does not exist
    """
    template = templates.get(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task {template_id} not found")
    return template
