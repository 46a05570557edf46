"""Repository implementations backed by SQLAlchemy sessions.

Every write commits immediately. A provisioning run is a sequence of
independent commits, compensated by the run's ledger rather than wrapped in a
transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from scprov.adapters.sqlalchemy.mappings import (
    CLASS_BY_ENTITY_KIND,
    TABLE_BY_ENTITY_KIND,
    TABLE_BY_LOOKUP_KIND,
    pay_grade_amount_table,
    pay_grade_table,
    pay_grade_type_table,
    pay_grade_version_table,
)
from scprov.domain.model import EntityKind, PayGradeAmount, PayGradeVersion
from scprov.domain.ports.persistence import DestroyResult, VersionAnchor
from scprov.domain.provisioning.errors import CreationError, PricingPreconditionError

if TYPE_CHECKING:
    import uuid
    from collections.abc import Mapping
    from datetime import date
    from decimal import Decimal

    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.orm import Session

    from scprov.domain.model import LookupKind


def _describe(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _match_columns(table: Table, attrs: Mapping[str, object]) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    for name, value in attrs.items():
        if name not in table.c:
            raise ValueError(f"{table.name} has no column {name!r}")
        column = table.c[name]
        clauses.append(column.is_(None) if value is None else column == value)
    return clauses


class SqlAlchemyEntityStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_attributes(
        self, kind: EntityKind, attrs: Mapping[str, object]
    ) -> uuid.UUID | None:
        table = TABLE_BY_ENTITY_KIND[kind]
        stmt = select(table.c.id).where(*_match_columns(table, attrs)).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, kind: EntityKind, attrs: Mapping[str, object]) -> uuid.UUID:
        entity = CLASS_BY_ENTITY_KIND[kind](**attrs)
        handle = entity.id
        self.session.add(entity)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise CreationError(kind, attrs, _describe(exc)) from exc
        return handle

    def destroy(self, kind: EntityKind, handle: uuid.UUID) -> DestroyResult:
        table = TABLE_BY_ENTITY_KIND[kind]
        try:
            if kind is EntityKind.PRICE_VERSION:
                self.session.execute(
                    delete(pay_grade_amount_table).where(
                        pay_grade_amount_table.c.version_id == handle
                    )
                )
            result = self.session.execute(delete(table).where(table.c.id == handle))
            deleted = result.rowcount  # pyright: ignore[reportAttributeAccessIssue]
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            return DestroyResult.failed(_describe(exc))
        if not deleted:
            return DestroyResult.not_found()
        return DestroyResult.deleted()


class SqlAlchemyLookupRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_named(self, kind: LookupKind, name: str) -> uuid.UUID | None:
        table = TABLE_BY_LOOKUP_KIND[kind]
        stmt = select(table.c.id).where(table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyPayGradeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def pay_grade_for(self, provider_id: uuid.UUID, type_name: str) -> uuid.UUID | None:
        stmt = (
            select(pay_grade_table.c.id)
            .join(
                pay_grade_type_table,
                pay_grade_table.c.pay_grade_type_id == pay_grade_type_table.c.id,
            )
            .where(pay_grade_type_table.c.service_provider_id == provider_id)
            .where(pay_grade_type_table.c.name == type_name)
            .order_by(pay_grade_table.c.name)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def latest_version(self, pay_grade_id: uuid.UUID) -> VersionAnchor | None:
        stmt = (
            select(pay_grade_version_table.c.id, pay_grade_version_table.c.effective)
            .where(pay_grade_version_table.c.pay_grade_id == pay_grade_id)
            .order_by(
                pay_grade_version_table.c.effective.desc(),
                pay_grade_version_table.c.created_at.desc(),
            )
            .limit(1)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return VersionAnchor(handle=row.id, effective_date=row.effective)

    def derive_new_version(
        self,
        prior: uuid.UUID,
        effective_date: date,
        amounts: Mapping[uuid.UUID, Decimal],
    ) -> uuid.UUID:
        pay_grade_id = self.session.execute(
            select(pay_grade_version_table.c.pay_grade_id).where(
                pay_grade_version_table.c.id == prior
            )
        ).scalar_one_or_none()
        if pay_grade_id is None:
            raise PricingPreconditionError(f"price version {prior} not found")

        merged = self.amounts_for(prior)
        merged.update(amounts)

        version = PayGradeVersion(pay_grade_id=pay_grade_id, effective=effective_date)
        handle = version.id
        try:
            self.session.add(version)
            self.session.flush()
            self.session.add_all(
                PayGradeAmount(version_id=handle, line_item_id=line_item_id, amount=amount)
                for line_item_id, amount in merged.items()
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise CreationError(
                EntityKind.PRICE_VERSION,
                {"prior": prior, "effective": effective_date},
                _describe(exc),
            ) from exc
        return handle

    def amounts_for(self, version_id: uuid.UUID) -> dict[uuid.UUID, Decimal]:
        stmt = select(pay_grade_amount_table.c.line_item_id, pay_grade_amount_table.c.amount).where(
            pay_grade_amount_table.c.version_id == version_id
        )
        return {row.line_item_id: row.amount for row in self.session.execute(stmt)}


if TYPE_CHECKING:
    from scprov.domain.ports.persistence import (
        EntityStore,
        LookupRepository,
        PayGradeRepository,
    )

    _session_stub = cast("Session", object())
    _entity_store_check: EntityStore = SqlAlchemyEntityStore(_session_stub)
    _lookup_repo_check: LookupRepository = SqlAlchemyLookupRepository(_session_stub)
    _pay_grade_repo_check: PayGradeRepository = SqlAlchemyPayGradeRepository(_session_stub)
