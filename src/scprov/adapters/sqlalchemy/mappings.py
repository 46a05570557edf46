"""SQLAlchemy mapping metadata for the scprov domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    event,
    orm,
)
from sqlalchemy.orm import configure_mappers

from scprov.domain.model import (
    Entity,
    EntityKind,
    LineItem,
    LineItemPart,
    LineItemServiceCode,
    LineItemType,
    LookupKind,
    Part,
    PartCategory,
    PartType,
    PayGrade,
    PayGradeAmount,
    PayGradeType,
    PayGradeVersion,
    ServiceCode,
    ServiceCodeType,
    ServiceProvider,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _named_table(name: str) -> Table:
    return Table(
        name,
        mapper_registry.metadata,
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column("name", String, nullable=False, unique=True),
    )


# Reference tables ------------------------------------------------------------

service_provider_table = _named_table("service_provider")
part_category_table = _named_table("part_category")
part_type_table = _named_table("part_type")
line_item_type_table = _named_table("line_item_type")
service_code_type_table = _named_table("service_code_type")

pay_grade_type_table = Table(
    "pay_grade_type",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "service_provider_id",
        UUIDColumnType,
        ForeignKey("service_provider.id"),
        nullable=False,
    ),
    Column("name", String, nullable=False),
    UniqueConstraint("service_provider_id", "name"),
)

pay_grade_table = Table(
    "pay_grade",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("pay_grade_type_id", UUIDColumnType, ForeignKey("pay_grade_type.id"), nullable=False),
    Column("name", String, nullable=False),
)

# Catalog tables --------------------------------------------------------------

part_table = Table(
    "part",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("number", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("part_category_id", UUIDColumnType, ForeignKey("part_category.id"), nullable=True),
    Column("part_type_id", UUIDColumnType, ForeignKey("part_type.id"), nullable=True),
    Column("serialized", Boolean, nullable=False, default=False),
    Column("active", Boolean, nullable=False, default=True),
    Column("ir_price_available", Boolean, nullable=False, default=False),
    Column("returnable", Boolean, nullable=False, default=True),
)

line_item_table = Table(
    "line_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("description", String, nullable=False),
    Column("line_item_type_id", UUIDColumnType, ForeignKey("line_item_type.id"), nullable=True),
)

line_item_part_table = Table(
    "line_item_part",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("line_item_id", UUIDColumnType, ForeignKey("line_item.id"), nullable=False),
    Column("part_id", UUIDColumnType, ForeignKey("part.id"), nullable=False),
    UniqueConstraint("line_item_id", "part_id"),
)

service_code_table = Table(
    "service_code",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("description", String, nullable=False),
    Column("short_name", String, nullable=False),
    Column(
        "service_code_type_id",
        UUIDColumnType,
        ForeignKey("service_code_type.id"),
        nullable=True,
    ),
    Column("rank", Integer, nullable=False, default=0),
    Column("active", Boolean, nullable=False, default=True),
    Column("smart_home", Boolean, nullable=False, default=False),
    Column("chargeback", Boolean, nullable=False, default=True),
)

line_item_service_code_table = Table(
    "line_item_service_code",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("service_code_id", UUIDColumnType, ForeignKey("service_code.id"), nullable=False),
    Column("line_item_id", UUIDColumnType, ForeignKey("line_item.id"), nullable=False),
    UniqueConstraint("service_code_id", "line_item_id"),
)

# Pricing tables --------------------------------------------------------------

pay_grade_version_table = Table(
    "pay_grade_version",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("pay_grade_id", UUIDColumnType, ForeignKey("pay_grade.id"), nullable=False),
    Column("effective", Date, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)

pay_grade_amount_table = Table(
    "pay_grade_amount",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "version_id",
        UUIDColumnType,
        ForeignKey("pay_grade_version.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("line_item_id", UUIDColumnType, ForeignKey("line_item.id"), nullable=False),
    Column("amount", Numeric(12, 2, asdecimal=True), nullable=False),
    UniqueConstraint("version_id", "line_item_id"),
)

_CLASS_TABLES: Final[tuple[tuple[type[Entity], Table], ...]] = (
    (ServiceProvider, service_provider_table),
    (PartCategory, part_category_table),
    (PartType, part_type_table),
    (LineItemType, line_item_type_table),
    (ServiceCodeType, service_code_type_table),
    (PayGradeType, pay_grade_type_table),
    (PayGrade, pay_grade_table),
    (Part, part_table),
    (LineItem, line_item_table),
    (LineItemPart, line_item_part_table),
    (ServiceCode, service_code_table),
    (LineItemServiceCode, line_item_service_code_table),
    (PayGradeVersion, pay_grade_version_table),
    (PayGradeAmount, pay_grade_amount_table),
)

CLASS_BY_ENTITY_KIND: Final[dict[EntityKind, type[Entity]]] = {
    EntityKind.PART: Part,
    EntityKind.LINE_ITEM: LineItem,
    EntityKind.LINE_ITEM_PART: LineItemPart,
    EntityKind.SERVICE_CODE: ServiceCode,
    EntityKind.LINE_ITEM_SERVICE_CODE: LineItemServiceCode,
    EntityKind.PRICE_VERSION: PayGradeVersion,
}

TABLE_BY_ENTITY_KIND: Final[dict[EntityKind, Table]] = {
    EntityKind.PART: part_table,
    EntityKind.LINE_ITEM: line_item_table,
    EntityKind.LINE_ITEM_PART: line_item_part_table,
    EntityKind.SERVICE_CODE: service_code_table,
    EntityKind.LINE_ITEM_SERVICE_CODE: line_item_service_code_table,
    EntityKind.PRICE_VERSION: pay_grade_version_table,
}

TABLE_BY_LOOKUP_KIND: Final[dict[LookupKind, Table]] = {
    LookupKind.SERVICE_PROVIDER: service_provider_table,
    LookupKind.PART_CATEGORY: part_category_table,
    LookupKind.PART_TYPE: part_type_table,
    LookupKind.LINE_ITEM_TYPE: line_item_type_table,
    LookupKind.SERVICE_CODE_TYPE: service_code_type_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for entity_cls, table in _CLASS_TABLES:
        mapper_registry.map_imperatively(entity_cls, table)

    configure_mappers()
    return mapper_registry


def enforce_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on SQLite foreign-key checks for every new connection of ``engine``.

    Rollback ordering only matters when the database refuses to orphan rows.
    """

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
