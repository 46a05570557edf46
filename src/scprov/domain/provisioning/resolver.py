"""Idempotent find-or-create against the entity store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import Logger, getLogger
from typing import TYPE_CHECKING

from scprov.domain.provisioning.kinds import MatchPolicy, spec_for

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from scprov.domain.model import EntityKind
    from scprov.domain.ports.persistence import EntityStore
    from scprov.domain.provisioning.kinds import TemplateContext
    from scprov.domain.provisioning.ledger import ProvisioningLedger

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    handle: UUID
    was_created: bool


class EntityResolver:
    def __init__(self, store: EntityStore, *, logger: Logger | None = None) -> None:
        self._store = store
        self._log = logger or log

    def full_attributes(
        self,
        kind: EntityKind,
        natural_key: Mapping[str, object],
        extra: Mapping[str, object] | None,
        template: TemplateContext,
    ) -> dict[str, object]:
        """Merge the kind's defaults with the caller's values; the caller wins."""

        spec = spec_for(kind)
        if set(natural_key) != spec.natural_key:
            expected = ", ".join(sorted(spec.natural_key))
            raise ValueError(f"{kind} natural key must be ({expected}), got {sorted(natural_key)}")
        return {**spec.defaults(template), **natural_key, **(extra or {})}

    def resolve(
        self,
        kind: EntityKind,
        natural_key: Mapping[str, object],
        extra: Mapping[str, object] | None = None,
        *,
        template: TemplateContext,
        ledger: ProvisioningLedger,
    ) -> Resolution:
        """Return the existing row for these attributes or create it.

        Only creations reach the ledger. Store failures on create propagate as
        ``CreationError`` and leave the ledger as it was.
        """

        attributes = self.full_attributes(kind, natural_key, extra, template)
        criteria = natural_key if spec_for(kind).match is MatchPolicy.NATURAL_KEY else attributes

        existing = self._store.find_by_attributes(kind, criteria)
        if existing is not None:
            self._log.debug("%s already exists with %s", kind, dict(natural_key))
            return Resolution(handle=existing, was_created=False)

        handle = self._store.create(kind, attributes)
        ledger.record_created(kind, handle)
        self._log.debug("Created %s %s", kind, handle)
        return Resolution(handle=handle, was_created=True)
