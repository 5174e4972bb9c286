"""Completion lookup for recurring occurrences.

The materializer only needs one capability: given a template id and a day, return the
completion record for that occurrence if there is one. Anything with a matching ``find``
method works, including ``CompletionRecordRepository``.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable

from focal.models.completion import CompletionRecord


@runtime_checkable
class CompletionLookup(Protocol):
    def find(self, template_id: str, day: date) -> Optional[CompletionRecord]:
        ...


class ListCompletionLookup:
    """Linear scan over a caller-supplied list; the first match wins."""

    def __init__(self, records: Iterable[CompletionRecord]):
        self.records = list(records)

    def find(self, template_id: str, day: date) -> Optional[CompletionRecord]:
        for record in self.records:
            if record.template_id == template_id and record.occurrence_date == day:
                return record
        return None


class IndexedCompletionLookup:
    """Records indexed by (template_id, day). Same answers as ListCompletionLookup."""

    def __init__(self, records: Iterable[CompletionRecord]):
        self._index: Dict[Tuple[str, date], CompletionRecord] = {}
        for record in records:
            # Duplicates: keep the first, like the linear scan does.
            self._index.setdefault((record.template_id, record.occurrence_date), record)

    def __len__(self) -> int:
        return len(self._index)

    def find(self, template_id: str, day: date) -> Optional[CompletionRecord]:
        return self._index.get((template_id, day))


CompletionSource = Union[None, CompletionLookup, Iterable[CompletionRecord]]


def as_completion_lookup(source: CompletionSource) -> CompletionLookup:
    """Coerce None, a record list, or an existing lookup into a CompletionLookup."""
    if source is None:
        return IndexedCompletionLookup([])
    if isinstance(source, CompletionLookup):
        return source
    return IndexedCompletionLookup(source)
