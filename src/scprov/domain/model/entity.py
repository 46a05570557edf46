"""Base building block: every persisted row carries a UUID handle."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity exists as soon as the object is built, before it is persisted."""

    id: UUID = field(default_factory=new_id)
