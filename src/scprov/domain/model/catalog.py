"""Rows that make up one onboarded service code.

A code is onboarded once it has a part, a line item linked to that part, and a
service code linked to the same line item.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scprov.domain.model.entity import Entity

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Part(Entity):
    number: str
    name: str
    part_category_id: UUID | None = None
    part_type_id: UUID | None = None
    serialized: bool = False
    active: bool = True
    ir_price_available: bool = False
    returnable: bool = True


@dataclass(eq=False, kw_only=True)
class LineItem(Entity):
    description: str
    line_item_type_id: UUID | None = None


@dataclass(eq=False, kw_only=True)
class LineItemPart(Entity):
    line_item_id: UUID
    part_id: UUID


@dataclass(eq=False, kw_only=True)
class ServiceCode(Entity):
    description: str
    short_name: str
    service_code_type_id: UUID | None = None
    rank: int = 0
    active: bool = True
    smart_home: bool = False
    chargeback: bool = True


@dataclass(eq=False, kw_only=True)
class LineItemServiceCode(Entity):
    service_code_id: UUID
    line_item_id: UUID
