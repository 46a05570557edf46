"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from scprov.domain.ports.persistence import (
        EntityStore,
        LookupRepository,
        PayGradeRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    For provisioning the boundary scopes a connection, not a transaction: the
    repositories commit each write as it happens.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ProvisioningRepositories(RepositoryCollection):
    """Repositories a provisioning run needs."""

    entities: EntityStore
    lookups: LookupRepository
    pay_grades: PayGradeRepository


type ProvisioningUnitOfWork = UnitOfWork[ProvisioningRepositories]
