"""Task template creation factory for Focal.

This module centralizes template creation logic so that every entry point
(API, tests, imports) applies the same defaults.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List

from focal.models.task import TaskTemplate
from focal.models.recurrence import NoRecurrence, RecurrenceRule
from focal.models.subtask import Subtask
from focal.models.constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_ENERGY_LEVEL,
    DEFAULT_ICON,
    DEFAULT_COLOR_NAME,
)


def create_template_defaults() -> Dict[str, Any]:
    """Get default template values as a dictionary.

    Returns:
        Dictionary with default field values using constants
    """
    return {
        "icon": DEFAULT_ICON,
        "color_name": DEFAULT_COLOR_NAME,
        "duration": timedelta(minutes=DEFAULT_DURATION_MINUTES),
        "recurrence": NoRecurrence(),
        "energy_level": DEFAULT_ENERGY_LEVEL,
    }


def create_task_template(
    title: str,
    anchor_start: datetime,
    duration: Optional[timedelta] = None,
    recurrence: Optional[RecurrenceRule] = None,
    icon: Optional[str] = None,
    color_name: Optional[str] = None,
    energy_level: Optional[int] = None,
    notes: Optional[str] = None,
    subtasks: Optional[List[Subtask]] = None,
    template_id: Optional[str] = None,
) -> TaskTemplate:
    """Create a task template with defaults, allowing overrides.

    Args:
        title: Task title (required)
        anchor_start: Start of the first occurrence (required)
        duration: Elapsed time of each occurrence (defaults to constant)
        recurrence: Recurrence rule (defaults to NoRecurrence)
        icon: Display icon
        color_name: Display color name
        energy_level: Energy needed, 0..4 (defaults to constant)
        notes: Task notes
        subtasks: Initial checklist items
        template_id: Explicit id (a fresh UUID v4 when omitted)

    Returns:
        TaskTemplate with defaults applied
    """
    now = datetime.utcnow()
    defaults = create_template_defaults()

    return TaskTemplate(
        id=template_id or str(uuid.uuid4()),
        title=title,
        icon=icon if icon is not None else defaults["icon"],
        color_name=color_name if color_name is not None else defaults["color_name"],
        anchor_start=anchor_start,
        duration=duration if duration is not None else defaults["duration"],
        recurrence=recurrence if recurrence is not None else defaults["recurrence"],
        energy_level=energy_level if energy_level is not None else defaults["energy_level"],
        notes=notes,
        subtasks=list(subtasks or []),
        is_completed=False,
        completed_at=None,
        created_at=now,
        updated_at=now,
    )
