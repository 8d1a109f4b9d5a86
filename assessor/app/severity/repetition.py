"""
Repetition lookup port.

The severity engine asks the persistence layer how many open findings
of the same organization (outside the current review) concern the same
protocol question or the same audit area. The query is the only I/O in
a severity evaluation, so it is isolated behind this interface and
injected by the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from pydantic import TypeAdapter

from assessor.app.schemas.findings import (
    AuditArea,
    FindingStatus,
    PriorFindingRecord,
)


class RepetitionLookup(Protocol):
    """
    Interface for counting similar open findings.

    Implementations may raise on datastore failure; callers treat any
    failure as "no repetition data".
    """

    async def find_similar_open_findings(
        self,
        organization_id: str,
        exclude_review_id: Optional[str],
        question_id: Optional[str] = None,
        audit_area: Optional[AuditArea] = None,
    ) -> int:
        ...


class NullRepetitionLookup:
    """
    A lookup that never finds anything.

    Used when:
    - repetition lookup is disabled
    - no finding store is wired
    - tests that do not care about repetition
    """

    async def find_similar_open_findings(
        self,
        organization_id: str,
        exclude_review_id: Optional[str],
        question_id: Optional[str] = None,
        audit_area: Optional[AuditArea] = None,
    ) -> int:
        return 0


class InMemoryRepetitionLookup:
    """
    Repetition lookup over an in-process list of prior findings.

    Applies the same filter as the production finding store:
    - same organization
    - review differs from the excluded review
    - status is not CLOSED
    - same question OR same audit area of the parent question, where each
      alternative only applies when its field is given; with neither
      given, nothing matches
    """

    def __init__(self, records: Iterable[PriorFindingRecord] = ()) -> None:
        self._records: List[PriorFindingRecord] = list(records)

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryRepetitionLookup":
        """
        Load prior finding records from a JSON array.

        Malformed files raise pydantic.ValidationError at startup.
        """
        records = TypeAdapter(List[PriorFindingRecord]).validate_json(
            path.read_bytes()
        )
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: PriorFindingRecord) -> None:
        self._records.append(record)

    def _matches(
        self,
        record: PriorFindingRecord,
        organization_id: str,
        exclude_review_id: Optional[str],
        question_id: Optional[str],
        audit_area: Optional[AuditArea],
    ) -> bool:
        if record.organization_id != organization_id:
            return False
        if record.review_id == exclude_review_id:
            return False
        if record.status is FindingStatus.CLOSED:
            return False

        alternatives = []
        if question_id:
            alternatives.append(record.question_id == question_id)
        if audit_area is not None:
            alternatives.append(record.question_audit_area is audit_area)

        return any(alternatives)

    async def find_similar_open_findings(
        self,
        organization_id: str,
        exclude_review_id: Optional[str],
        question_id: Optional[str] = None,
        audit_area: Optional[AuditArea] = None,
    ) -> int:
        return sum(
            1
            for record in self._records
            if self._matches(
                record,
                organization_id,
                exclude_review_id,
                question_id,
                audit_area,
            )
        )
