"""In-memory fakes of the provisioning store ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from scprov.config import ProvisioningConfig
from scprov.domain.model import EntityKind, LookupKind
from scprov.domain.ports.persistence import DestroyResult, VersionAnchor
from scprov.domain.ports.unit_of_work import ProvisioningRepositories
from scprov.domain.provisioning import CreationError, PricingPreconditionError

if TYPE_CHECKING:
    from collections.abc import Mapping


PROVIDER = "Asurion"
SERVICE_CODE_TYPE = "Payroll"
KIND = "Equipment"
PRIOR_EFFECTIVE = date(2024, 1, 1)


class FakeEntityStore:
    """Dict-backed ``EntityStore`` that records every call in order."""

    def __init__(self) -> None:
        self.rows: dict[EntityKind, dict[UUID, dict[str, object]]] = {}
        self.created: list[tuple[EntityKind, UUID]] = []
        self.destroyed: list[tuple[EntityKind, UUID]] = []
        self.fail_create: set[EntityKind] = set()
        self.fail_destroy: dict[UUID, str] = {}
        self.raise_on_destroy: set[UUID] = set()

    def find_by_attributes(self, kind: EntityKind, attrs: Mapping[str, object]) -> UUID | None:
        for handle, row in self.rows.get(kind, {}).items():
            if all(row.get(name) == value for name, value in attrs.items()):
                return handle
        return None

    def create(self, kind: EntityKind, attrs: Mapping[str, object]) -> UUID:
        if kind in self.fail_create:
            raise CreationError(kind, attrs, "rejected by fake store")
        handle = uuid4()
        self.rows.setdefault(kind, {})[handle] = dict(attrs)
        self.created.append((kind, handle))
        return handle

    def destroy(self, kind: EntityKind, handle: UUID) -> DestroyResult:
        self.destroyed.append((kind, handle))
        if handle in self.raise_on_destroy:
            raise RuntimeError("store went away")
        if handle in self.fail_destroy:
            return DestroyResult.failed(self.fail_destroy[handle])
        if self.rows.get(kind, {}).pop(handle, None) is None:
            return DestroyResult.not_found()
        return DestroyResult.deleted()

    def count(self, kind: EntityKind) -> int:
        return len(self.rows.get(kind, {}))

    def row(self, kind: EntityKind, handle: UUID) -> dict[str, object]:
        return self.rows[kind][handle]


class FakeLookupRepository:
    def __init__(self, names: Mapping[LookupKind, set[str]] | None = None) -> None:
        self.handles: dict[tuple[LookupKind, str], UUID] = {}
        for kind, kind_names in (names or {}).items():
            for name in kind_names:
                self.add(kind, name)

    def add(self, kind: LookupKind, name: str) -> UUID:
        handle = uuid4()
        self.handles[kind, name] = handle
        return handle

    def find_named(self, kind: LookupKind, name: str) -> UUID | None:
        return self.handles.get((kind, name))

    def handle(self, kind: LookupKind, name: str) -> UUID:
        return self.handles[kind, name]


@dataclass
class FakeVersion:
    pay_grade_id: UUID
    effective: date
    amounts: dict[UUID, Decimal] = field(default_factory=dict[UUID, Decimal])


class FakePayGradeRepository:
    """Derived versions are also registered with ``entities`` so rollback can destroy them."""

    def __init__(self, entities: FakeEntityStore | None = None) -> None:
        self.entities = entities
        self.pay_grades: dict[tuple[UUID, str], UUID] = {}
        self.versions: dict[UUID, FakeVersion] = {}
        self.derived: list[tuple[UUID, date, dict[UUID, Decimal]]] = []

    def add_pay_grade(self, provider_id: UUID, type_name: str) -> UUID:
        handle = uuid4()
        self.pay_grades[provider_id, type_name] = handle
        return handle

    def add_version(
        self,
        pay_grade_id: UUID,
        effective: date,
        amounts: Mapping[UUID, Decimal] | None = None,
    ) -> UUID:
        handle = uuid4()
        self.versions[handle] = FakeVersion(pay_grade_id, effective, dict(amounts or {}))
        return handle

    def pay_grade_for(self, provider_id: UUID, type_name: str) -> UUID | None:
        return self.pay_grades.get((provider_id, type_name))

    def latest_version(self, pay_grade_id: UUID) -> VersionAnchor | None:
        candidates = [
            (version.effective, handle)
            for handle, version in self.versions.items()
            if version.pay_grade_id == pay_grade_id
        ]
        if not candidates:
            return None
        effective, handle = max(candidates, key=lambda item: item[0])
        return VersionAnchor(handle=handle, effective_date=effective)

    def derive_new_version(
        self,
        prior: UUID,
        effective_date: date,
        amounts: Mapping[UUID, Decimal],
    ) -> UUID:
        prior_version = self.versions.get(prior)
        if prior_version is None:
            raise PricingPreconditionError(f"price version {prior} not found")
        self.derived.append((prior, effective_date, dict(amounts)))
        handle = self.add_version(
            prior_version.pay_grade_id,
            effective_date,
            {**prior_version.amounts, **amounts},
        )
        if self.entities is not None:
            self.entities.rows.setdefault(EntityKind.PRICE_VERSION, {})[handle] = {
                "effective": effective_date
            }
        return handle

    def amounts_for(self, version_id: UUID) -> dict[UUID, Decimal]:
        return dict(self.versions[version_id].amounts)


@dataclass
class FakeProvisioningBackend:
    """The three fakes wired together, seeded with the default reference rows."""

    entities: FakeEntityStore
    lookups: FakeLookupRepository
    pay_grades: FakePayGradeRepository
    provider_id: UUID
    pay_grade_id: UUID
    prior_version: UUID

    @property
    def repositories(self) -> ProvisioningRepositories:
        return ProvisioningRepositories(
            entities=self.entities,
            lookups=self.lookups,
            pay_grades=self.pay_grades,
        )


def make_backend(*, kinds: tuple[str, ...] = (KIND,)) -> FakeProvisioningBackend:
    lookups = FakeLookupRepository(
        {
            LookupKind.SERVICE_PROVIDER: {PROVIDER},
            LookupKind.PART_CATEGORY: {PROVIDER},
            LookupKind.SERVICE_CODE_TYPE: {SERVICE_CODE_TYPE.lower()},
            LookupKind.PART_TYPE: {kind.lower() for kind in kinds},
            LookupKind.LINE_ITEM_TYPE: set(kinds),
        }
    )
    provider_id = lookups.handle(LookupKind.SERVICE_PROVIDER, PROVIDER)
    entities = FakeEntityStore()
    pay_grades = FakePayGradeRepository(entities)
    pay_grade_id = pay_grades.add_pay_grade(provider_id, KIND)
    prior_version = pay_grades.add_version(pay_grade_id, PRIOR_EFFECTIVE)
    return FakeProvisioningBackend(
        entities=entities,
        lookups=lookups,
        pay_grades=pay_grades,
        provider_id=provider_id,
        pay_grade_id=pay_grade_id,
        prior_version=prior_version,
    )


def make_config(**overrides: object) -> ProvisioningConfig:
    return ProvisioningConfig().with_overrides(**overrides)


class FakeUnitOfWork:
    """Context manager handing out a fake backend's repositories."""

    def __init__(self, backend: FakeProvisioningBackend) -> None:
        self.backend = backend
        self.committed = False
        self.rolled_back = False

    @property
    def repositories(self) -> ProvisioningRepositories:
        return self.backend.repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(self, exc_type: object, exc_value: object, traceback: object) -> bool:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True
