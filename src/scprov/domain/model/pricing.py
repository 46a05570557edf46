"""Dated price snapshots for a pay grade."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from scprov.domain.model.entity import Entity

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal
    from uuid import UUID


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class PayGradeVersion(Entity):
    """One snapshot. Versions are never edited; a new one supersedes the last."""

    pay_grade_id: UUID
    effective: date
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(eq=False, kw_only=True)
class PayGradeAmount(Entity):
    version_id: UUID
    line_item_id: UUID
    amount: Decimal
