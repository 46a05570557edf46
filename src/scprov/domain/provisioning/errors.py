"""Failures raised (or, for rollback, collected) by the provisioning engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scprov.domain.model import EntityKind, LookupKind
    from scprov.domain.provisioning.ledger import LedgerEntry


class ProvisioningError(RuntimeError):
    """Base class for provisioning failures."""


class SetupError(ProvisioningError):
    """A named reference row every creation depends on does not exist."""

    def __init__(self, lookup: LookupKind, name: str) -> None:
        super().__init__(f"{lookup} {name!r} not found")
        self.lookup = lookup
        self.name = name


class CreationError(ProvisioningError):
    """The store rejected a create call."""

    def __init__(
        self,
        kind: EntityKind,
        attrs: Mapping[str, object],
        reason: str | None = None,
    ) -> None:
        message = f"could not create {kind} with {dict(attrs)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.kind = kind
        self.attrs = dict(attrs)
        self.reason = reason


class RollbackEntryError(ProvisioningError):
    """One ledger entry could not be deleted. Logged and collected, never raised."""

    def __init__(self, entry: LedgerEntry, reason: str) -> None:
        super().__init__(f"failed to destroy {entry.kind} {entry.handle}: {reason}")
        self.entry = entry
        self.reason = reason


class PricingPreconditionError(ProvisioningError):
    """There is no prior price version to anchor a new one against."""
