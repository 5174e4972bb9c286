"""Repository for CompletionRecord database operations.

Also usable directly as a ``CompletionLookup`` by the occurrence materializer.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from focal.database.models import CompletionRecordDB
from focal.models.completion import CompletionRecord

logger = logging.getLogger(__name__)


class CompletionRecordRepository:
    """Repository for per-occurrence completion records."""

    def __init__(self, db: Session):
        self.db = db

    def _query_for(self, template_id: str, day: date):
        return self.db.query(CompletionRecordDB).filter(
            CompletionRecordDB.template_id == template_id,
            CompletionRecordDB.occurrence_date == day,
        )

    def find(self, template_id: str, day: date) -> Optional[CompletionRecord]:
        """First completion record for (template_id, day), or None."""
        row = (
            self._query_for(template_id, day)
            .order_by(CompletionRecordDB.completed_at, CompletionRecordDB.id)
            .first()
        )
        return row.to_pydantic() if row else None

    def list_all(self) -> List[CompletionRecord]:
        rows = self.db.query(CompletionRecordDB).order_by(CompletionRecordDB.occurrence_date).all()
        return [row.to_pydantic() for row in rows]

    def list_for_template(self, template_id: str) -> List[CompletionRecord]:
        rows = (
            self.db.query(CompletionRecordDB)
            .filter(CompletionRecordDB.template_id == template_id)
            .order_by(CompletionRecordDB.occurrence_date)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def list_in_range(
        self,
        start: date,
        end: date,
        template_ids: Optional[Iterable[str]] = None,
    ) -> List[CompletionRecord]:
        """Records with start <= occurrence_date <= end, optionally limited to some templates."""
        query = self.db.query(CompletionRecordDB).filter(
            CompletionRecordDB.occurrence_date >= start,
            CompletionRecordDB.occurrence_date <= end,
        )
        if template_ids is not None:
            query = query.filter(CompletionRecordDB.template_id.in_(list(template_ids)))
        rows = query.order_by(CompletionRecordDB.occurrence_date, CompletionRecordDB.completed_at).all()
        return [row.to_pydantic() for row in rows]

    def mark_completed(
        self,
        template_id: str,
        day: date,
        completed_at: Optional[datetime] = None,
    ) -> CompletionRecord:
        """Record a completion for (template_id, day); returns the existing record if there is one."""
        existing = self.find(template_id, day)
        if existing is not None:
            return existing

        record = CompletionRecord(
            template_id=template_id,
            occurrence_date=day,
            completed_at=completed_at or datetime.utcnow(),
        )
        row = CompletionRecordDB.from_pydantic(record)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to mark {template_id} completed on {day.isoformat()}: {type(e).__name__}: {str(e)}"
            )
            raise
        logger.debug(f"Marked {template_id} completed on {day.isoformat()}")
        return row.to_pydantic()

    def unmark(self, template_id: str, day: date) -> int:
        """Remove every completion record for (template_id, day). Returns how many were removed."""
        try:
            removed = self._query_for(template_id, day).delete(synchronize_session=False)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to unmark {template_id} on {day.isoformat()}: {type(e).__name__}: {str(e)}"
            )
            raise
        return removed

    def toggle(self, template_id: str, day: date) -> bool:
        """Flip completion for one occurrence. Returns the new completion state."""
        if self.find(template_id, day) is not None:
            self.unmark(template_id, day)
            return False
        self.mark_completed(template_id, day)
        return True

    def delete_for_template(self, template_id: str) -> int:
        """Remove all completion records of a template."""
        try:
            removed = (
                self.db.query(CompletionRecordDB)
                .filter(CompletionRecordDB.template_id == template_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to delete completion records of {template_id}: {type(e).__name__}: {str(e)}"
            )
            raise
        return removed
