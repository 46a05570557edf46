"""Provisioning engine: resolve, record, price and roll back one run."""

from __future__ import annotations

from .context import PricingAccumulator, ProvisionedCode, RunContext
from .engine import ProvisioningEngine
from .errors import (
    CreationError,
    PricingPreconditionError,
    ProvisioningError,
    RollbackEntryError,
    SetupError,
)
from .kinds import KindSpec, MatchPolicy, TemplateContext, resolvable_kinds, spec_for
from .ledger import LedgerEntry, ProvisioningLedger
from .pricing import PriceVersion, PriceVersionBuilder
from .resolver import EntityResolver, Resolution

__all__ = [
    "CreationError",
    "EntityResolver",
    "KindSpec",
    "LedgerEntry",
    "MatchPolicy",
    "PriceVersion",
    "PriceVersionBuilder",
    "PricingAccumulator",
    "PricingPreconditionError",
    "ProvisionedCode",
    "ProvisioningEngine",
    "ProvisioningError",
    "ProvisioningLedger",
    "Resolution",
    "RollbackEntryError",
    "RunContext",
    "SetupError",
    "TemplateContext",
    "resolvable_kinds",
    "spec_for",
]
