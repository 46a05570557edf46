"""SQLAlchemy adapter package for scprov."""

from __future__ import annotations

from .mappings import (
    CLASS_BY_ENTITY_KIND,
    TABLE_BY_ENTITY_KIND,
    TABLE_BY_LOOKUP_KIND,
    enforce_sqlite_foreign_keys,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyEntityStore,
    SqlAlchemyLookupRepository,
    SqlAlchemyPayGradeRepository,
)

__all__ = [
    "CLASS_BY_ENTITY_KIND",
    "TABLE_BY_ENTITY_KIND",
    "TABLE_BY_LOOKUP_KIND",
    "SqlAlchemyEntityStore",
    "SqlAlchemyLookupRepository",
    "SqlAlchemyPayGradeRepository",
    "enforce_sqlite_foreign_keys",
    "mapper_registry",
    "start_mappers",
]
