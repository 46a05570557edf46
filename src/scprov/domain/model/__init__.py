"""Public domain model surface."""

from __future__ import annotations

from scprov.domain.model.catalog import (
    LineItem,
    LineItemPart,
    LineItemServiceCode,
    Part,
    ServiceCode,
)
from scprov.domain.model.entity import Entity, new_id
from scprov.domain.model.enums import EntityKind, LookupKind
from scprov.domain.model.pricing import PayGradeAmount, PayGradeVersion
from scprov.domain.model.reference import (
    LineItemType,
    PartCategory,
    PartType,
    PayGrade,
    PayGradeType,
    ServiceCodeType,
    ServiceProvider,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # enums
    "EntityKind",
    "LookupKind",
    # catalog
    "Part",
    "LineItem",
    "LineItemPart",
    "ServiceCode",
    "LineItemServiceCode",
    # reference
    "ServiceProvider",
    "PartCategory",
    "PartType",
    "LineItemType",
    "ServiceCodeType",
    "PayGradeType",
    "PayGrade",
    # pricing
    "PayGradeVersion",
    "PayGradeAmount",
]
