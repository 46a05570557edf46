"""Named reference rows that provisioning looks up but never creates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scprov.domain.model.entity import Entity

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ServiceProvider(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class PartCategory(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class PartType(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class LineItemType(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class ServiceCodeType(Entity):
    name: str


@dataclass(eq=False, kw_only=True)
class PayGradeType(Entity):
    """A provider-specific pay-grade line, e.g. ``Asurion / Equipment``."""

    service_provider_id: UUID
    name: str


@dataclass(eq=False, kw_only=True)
class PayGrade(Entity):
    pay_grade_type_id: UUID
    name: str
