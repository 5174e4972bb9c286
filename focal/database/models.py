"""SQLAlchemy database models for Focal."""

from datetime import datetime, timedelta
import uuid
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, JSON, ForeignKey, Index

from focal.database.database import Base
from focal.models.completion import CompletionRecord
from focal.models.recurrence import parse_recurrence, to_storage
from focal.models.subtask import Subtask
from focal.models.task import TaskTemplate


class TaskTemplateDB(Base):
    """Database model for TaskTemplate.

    The recurrence rule is stored in its legacy form (label + weekday list) and parsed
    back through ``parse_recurrence``, so unknown labels load as non-recurring.
    """

    __tablename__ = "task_templates"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Basic fields
    title = Column(String, nullable=False)
    icon = Column(String, nullable=False, default="📝")
    color_name = Column(String, nullable=False, default="sage")
    notes = Column(String, nullable=True)
    energy_level = Column(Integer, nullable=False, default=2)

    # Scheduling fields
    # ISO-8601 text keeps the UTC offset of aware datetimes (SQLite DATETIME drops it).
    anchor_start = Column(String, nullable=False, index=True)
    duration_seconds = Column(Integer, nullable=False, default=3600)

    # Recurrence (legacy encoding)
    recurrence_option = Column(String, nullable=True)
    repeat_days = Column(JSON, nullable=False, default=list)

    # Subtasks (stored as JSON array of objects)
    subtasks = Column(JSON, nullable=False, default=list)

    # Completion (non-recurring templates)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self) -> TaskTemplate:
        """Convert database model to Pydantic model."""
        return TaskTemplate(
            id=self.id,
            title=self.title,
            icon=self.icon,
            color_name=self.color_name,
            anchor_start=datetime.fromisoformat(self.anchor_start),
            duration=timedelta(seconds=self.duration_seconds or 0),
            recurrence=parse_recurrence(self.recurrence_option, self.repeat_days or []),
            energy_level=self.energy_level,
            notes=self.notes,
            subtasks=[Subtask.model_validate(s) for s in self.subtasks or []],
            is_completed=bool(self.is_completed),
            completed_at=self.completed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply_pydantic(self, template: TaskTemplate) -> None:
        """Copy every mutable field from a Pydantic model onto this row."""
        option, days = to_storage(template.recurrence)
        self.title = template.title
        self.icon = template.icon
        self.color_name = template.color_name
        self.notes = template.notes
        self.energy_level = template.energy_level
        self.anchor_start = template.anchor_start.isoformat()
        self.duration_seconds = int(template.duration.total_seconds())
        self.recurrence_option = option
        self.repeat_days = days
        self.subtasks = [s.model_dump(mode="json") for s in template.subtasks]
        self.is_completed = template.is_completed
        self.completed_at = template.completed_at
        self.created_at = template.created_at
        self.updated_at = template.updated_at

    @classmethod
    def from_pydantic(cls, template: TaskTemplate) -> "TaskTemplateDB":
        """Create database model from Pydantic model."""
        row = cls(id=template.id)
        row.apply_pydantic(template)
        return row


class CompletionRecordDB(Base):
    """Database model for CompletionRecord.

    No uniqueness on (template_id, occurrence_date): readers tolerate duplicates.
    """

    __tablename__ = "completion_records"
    __table_args__ = (
        Index("ix_completion_records_template_day", "template_id", "occurrence_date"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String, ForeignKey("task_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    occurrence_date = Column(Date, nullable=False, index=True)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self) -> CompletionRecord:
        """Convert database model to Pydantic model."""
        return CompletionRecord(
            id=self.id,
            template_id=self.template_id,
            occurrence_date=self.occurrence_date,
            completed_at=self.completed_at,
        )

    @classmethod
    def from_pydantic(cls, record: CompletionRecord) -> "CompletionRecordDB":
        """Create database model from Pydantic model."""
        return cls(
            id=record.id,
            template_id=record.template_id,
            occurrence_date=record.occurrence_date,
            completed_at=record.completed_at,
        )
