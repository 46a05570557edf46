"""Ports for reading the reference data to onboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from decimal import Decimal


@dataclass(frozen=True, slots=True)
class ServiceCodeRecord:
    """One code to onboard with its cost and, optionally, its kind (e.g. ``Labor``)."""

    code: str
    cost: Decimal
    kind: str | None = None


@runtime_checkable
class ServiceCodeSource(Protocol):
    """A finite, restartable sequence of records.

    Collapsing repeated codes (keeping the highest cost) is the source's job.
    """

    def __iter__(self) -> Iterator[ServiceCodeRecord]: ...


__all__ = ["ServiceCodeRecord", "ServiceCodeSource"]
