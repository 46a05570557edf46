"""Ports for the persistent store the provisioning engine writes to.

Every write is expected to commit on its own. The engine never opens a
transaction spanning a run; it compensates through the ledger instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date
    from decimal import Decimal
    from uuid import UUID

    from scprov.domain.model import EntityKind, LookupKind


class DestroyStatus(StrEnum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DestroyResult:
    """Outcome of a single ``destroy`` call."""

    status: DestroyStatus
    reason: str | None = None

    @classmethod
    def deleted(cls) -> DestroyResult:
        return cls(DestroyStatus.DELETED)

    @classmethod
    def not_found(cls) -> DestroyResult:
        return cls(DestroyStatus.NOT_FOUND)

    @classmethod
    def failed(cls, reason: str) -> DestroyResult:
        return cls(DestroyStatus.FAILED, reason)


@dataclass(frozen=True, slots=True)
class VersionAnchor:
    """The newest existing price version of a pay grade."""

    handle: UUID
    effective_date: date


@runtime_checkable
class EntityStore(Protocol):
    """Find, create and destroy rows of the resolvable entity kinds."""

    def find_by_attributes(self, kind: EntityKind, attrs: Mapping[str, object]) -> UUID | None:
        """Return a row whose columns equal every value in ``attrs``."""
        ...

    def create(self, kind: EntityKind, attrs: Mapping[str, object]) -> UUID:
        """Insert and commit a row; raise ``CreationError`` if the store refuses."""
        ...

    def destroy(self, kind: EntityKind, handle: UUID) -> DestroyResult: ...


@runtime_checkable
class LookupRepository(Protocol):
    """Read-only access to named reference rows."""

    def find_named(self, kind: LookupKind, name: str) -> UUID | None: ...


@runtime_checkable
class PayGradeRepository(Protocol):
    """Pay grades and their versioned price snapshots."""

    def pay_grade_for(self, provider_id: UUID, type_name: str) -> UUID | None: ...

    def latest_version(self, pay_grade_id: UUID) -> VersionAnchor | None: ...

    def derive_new_version(
        self,
        prior: UUID,
        effective_date: date,
        amounts: Mapping[UUID, Decimal],
    ) -> UUID:
        """Create a version carrying the prior amounts overlaid with ``amounts``."""
        ...

    def amounts_for(self, version_id: UUID) -> dict[UUID, Decimal]: ...
