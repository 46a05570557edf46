"""Per-kind strategy table: natural keys, default attributes and match policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from scprov.domain.model import EntityKind

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID


class MatchPolicy(StrEnum):
    """How the resolver decides that a row already exists."""

    # Every merged attribute must match. A template change between runs therefore
    # yields a second row; downstream audits rely on this narrow match.
    FULL_ATTRIBUTES = "full_attributes"
    NATURAL_KEY = "natural_key"


@dataclass(frozen=True, slots=True)
class TemplateContext:
    """Reference-row handles the default templates are filled from.

    Built once per kind hint by the engine; every field is already resolved.
    """

    part_category_id: UUID
    part_type_id: UUID
    line_item_type_id: UUID
    service_code_type_id: UUID


@dataclass(frozen=True, slots=True)
class KindSpec:
    natural_key: frozenset[str]
    defaults: Callable[[TemplateContext], Mapping[str, object]]
    match: MatchPolicy = MatchPolicy.FULL_ATTRIBUTES


def _part_defaults(template: TemplateContext) -> Mapping[str, object]:
    return {
        "part_category_id": template.part_category_id,
        "part_type_id": template.part_type_id,
        "serialized": False,
        "active": True,
        "ir_price_available": False,
        "returnable": True,
    }


def _line_item_defaults(template: TemplateContext) -> Mapping[str, object]:
    return {"line_item_type_id": template.line_item_type_id}


def _service_code_defaults(template: TemplateContext) -> Mapping[str, object]:
    return {
        "service_code_type_id": template.service_code_type_id,
        "rank": 0,
        "active": True,
        "smart_home": False,
        "chargeback": True,
    }


def _no_defaults(_template: TemplateContext) -> Mapping[str, object]:
    return {}


_REGISTRY: Final[dict[EntityKind, KindSpec]] = {
    EntityKind.PART: KindSpec(
        natural_key=frozenset({"number"}),
        defaults=_part_defaults,
        match=MatchPolicy.NATURAL_KEY,
    ),
    EntityKind.LINE_ITEM: KindSpec(
        natural_key=frozenset({"description"}),
        defaults=_line_item_defaults,
    ),
    EntityKind.LINE_ITEM_PART: KindSpec(
        natural_key=frozenset({"line_item_id", "part_id"}),
        defaults=_no_defaults,
    ),
    EntityKind.SERVICE_CODE: KindSpec(
        natural_key=frozenset({"description", "short_name"}),
        defaults=_service_code_defaults,
    ),
    EntityKind.LINE_ITEM_SERVICE_CODE: KindSpec(
        natural_key=frozenset({"service_code_id", "line_item_id"}),
        defaults=_no_defaults,
    ),
}


def spec_for(kind: EntityKind) -> KindSpec:
    try:
        return _REGISTRY[kind]
    except KeyError as exc:
        raise RuntimeError(f"{kind} is not resolvable") from exc


def resolvable_kinds() -> tuple[EntityKind, ...]:
    return tuple(_REGISTRY)
