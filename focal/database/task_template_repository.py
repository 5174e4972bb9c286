"""Repository for TaskTemplate database operations."""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from focal.database.models import CompletionRecordDB, TaskTemplateDB
from focal.models.subtask import Subtask
from focal.models.task import TaskTemplate

logger = logging.getLogger(__name__)


class TaskTemplateRepository:
    """Repository for TaskTemplate database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, template_id: str) -> Optional[TaskTemplateDB]:
        return self.db.query(TaskTemplateDB).filter(TaskTemplateDB.id == template_id).first()

    def _commit(self, action: str, template_id: str) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {action} task template {template_id}: {type(e).__name__}: {str(e)}")
            raise

    def create(self, template: TaskTemplate) -> TaskTemplate:
        """Create a new task template."""
        row = TaskTemplateDB.from_pydantic(template)
        self.db.add(row)
        self._commit("create", template.id)
        self.db.refresh(row)
        logger.debug(f"Created task template {template.id}: {template.title[:50]}")
        return row.to_pydantic()

    def get(self, template_id: str) -> Optional[TaskTemplate]:
        """Get template by ID."""
        row = self._get_row(template_id)
        return row.to_pydantic() if row else None

    def get_all(self) -> List[TaskTemplate]:
        """Get all templates sorted by creation date (newest first)."""
        rows = self.db.query(TaskTemplateDB).order_by(desc(TaskTemplateDB.created_at)).all()
        return [row.to_pydantic() for row in rows]

    def update(self, template: TaskTemplate) -> Optional[TaskTemplate]:
        """Replace a stored template. Returns None if it does not exist."""
        row = self._get_row(template.id)
        if row is None:
            return None
        row.apply_pydantic(template.model_copy(update={"updated_at": datetime.utcnow()}))
        self._commit("update", template.id)
        self.db.refresh(row)
        return row.to_pydantic()

    def delete(self, template_id: str) -> bool:
        """Delete a template together with all of its completion records."""
        row = self._get_row(template_id)
        if row is None:
            return False
        removed = (
            self.db.query(CompletionRecordDB)
            .filter(CompletionRecordDB.template_id == template_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(row)
        self._commit("delete", template_id)
        logger.debug(f"Deleted task template {template_id} and {removed} completion records")
        return True

    def toggle_completion(self, template_id: str) -> Optional[TaskTemplate]:
        """Flip the template's own completion flag (used for non-recurring templates)."""
        row = self._get_row(template_id)
        if row is None:
            return None
        now = datetime.utcnow()
        row.is_completed = not row.is_completed
        row.completed_at = now if row.is_completed else None
        row.updated_at = now
        self._commit("toggle completion of", template_id)
        self.db.refresh(row)
        return row.to_pydantic()

    def move_to_date(
        self,
        template_id: str,
        new_day: date,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
    ) -> Optional[TaskTemplate]:
        """Move the anchor to ``new_day``, keeping its time of day unless hour/minute are given."""
        template = self.get(template_id)
        if template is None:
            return None
        anchor = template.anchor_start
        moved = anchor.replace(
            year=new_day.year,
            month=new_day.month,
            day=new_day.day,
            hour=anchor.hour if hour is None else hour,
            minute=anchor.minute if minute is None else minute,
        )
        return self.update(template.model_copy(update={"anchor_start": moved}))

    def add_subtask(self, template_id: str, title: str) -> Optional[TaskTemplate]:
        """Append a new, unchecked subtask."""
        template = self.get(template_id)
        if template is None:
            return None
        subtasks = template.subtasks + [Subtask(title=title)]
        return self.update(template.model_copy(update={"subtasks": subtasks}))

    def remove_subtask(self, template_id: str, subtask_id: str) -> Optional[TaskTemplate]:
        """Remove a subtask. Returns None if the template or the subtask does not exist."""
        template = self.get(template_id)
        if template is None:
            return None
        subtasks = [s for s in template.subtasks if s.id != subtask_id]
        if len(subtasks) == len(template.subtasks):
            return None
        return self.update(template.model_copy(update={"subtasks": subtasks}))

    def toggle_subtask(self, template_id: str, subtask_id: str) -> Optional[TaskTemplate]:
        """Flip one subtask's checked state. Returns None if the template or the subtask does not exist."""
        template = self.get(template_id)
        if template is None:
            return None
        if not any(s.id == subtask_id for s in template.subtasks):
            return None
        subtasks = [
            s.model_copy(update={"is_completed": not s.is_completed}) if s.id == subtask_id else s
            for s in template.subtasks
        ]
        return self.update(template.model_copy(update={"subtasks": subtasks}))
