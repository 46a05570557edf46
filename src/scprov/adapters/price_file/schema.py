"""Pydantic model for one row of a service-code price file."""

from __future__ import annotations

from decimal import Decimal  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceCodeRow(BaseModel):
    """``number,cost[,type]``; any other columns are ignored."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    number: str = Field(min_length=1)
    cost: Decimal = Field(ge=0)
    type: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _blank_type_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value
