"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Kinds of rows a provisioning run can create and later roll back."""

    PART = "part"
    LINE_ITEM = "line_item"
    LINE_ITEM_PART = "line_item_part"
    SERVICE_CODE = "service_code"
    LINE_ITEM_SERVICE_CODE = "line_item_service_code"

    # Created by the pricing step only, never resolved:
    PRICE_VERSION = "price_version"


class LookupKind(StrEnum):
    """Reference tables that are looked up by name and never created by a run."""

    SERVICE_PROVIDER = "service_provider"
    PART_CATEGORY = "part_category"
    PART_TYPE = "part_type"
    LINE_ITEM_TYPE = "line_item_type"
    SERVICE_CODE_TYPE = "service_code_type"
