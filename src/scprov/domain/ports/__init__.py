"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ServiceCodeRecord, ServiceCodeSource
from .persistence import (
    DestroyResult,
    DestroyStatus,
    EntityStore,
    LookupRepository,
    PayGradeRepository,
    VersionAnchor,
)
from .unit_of_work import (
    ProvisioningRepositories,
    ProvisioningUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DestroyResult",
    "DestroyStatus",
    "EntityStore",
    "LookupRepository",
    "PayGradeRepository",
    "ProvisioningRepositories",
    "ProvisioningUnitOfWork",
    "RepositoryCollection",
    "ServiceCodeRecord",
    "ServiceCodeSource",
    "UnitOfWork",
    "VersionAnchor",
]
