"""Per-run state: the ledger, the pricing accumulator and what was processed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from decimal import Decimal
    from uuid import UUID

    from scprov.domain.provisioning.ledger import ProvisioningLedger
    from scprov.domain.provisioning.resolver import Resolution


class PricingAccumulator:
    """Line-item handle to cost, one entry per distinct line item.

    Two records resolving to the same line item keep the cost recorded last.
    """

    def __init__(self) -> None:
        self._amounts: dict[UUID, Decimal] = {}

    def record(self, line_item: UUID, cost: Decimal) -> None:
        self._amounts[line_item] = cost

    def amounts(self) -> dict[UUID, Decimal]:
        return dict(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def __contains__(self, line_item: object) -> bool:
        return line_item in self._amounts

    def __iter__(self) -> Iterator[UUID]:
        return iter(tuple(self._amounts))


@dataclass(frozen=True, slots=True)
class ProvisionedCode:
    """Resolutions for every row touched while onboarding one code."""

    code: str
    cost: Decimal
    part: Resolution
    line_item: Resolution
    line_item_part: Resolution
    service_code: Resolution
    line_item_service_code: Resolution

    @property
    def created_count(self) -> int:
        return sum(
            resolution.was_created
            for resolution in (
                self.part,
                self.line_item,
                self.line_item_part,
                self.service_code,
                self.line_item_service_code,
            )
        )


@dataclass(slots=True)
class RunContext:
    """Everything one provisioning pass owns. Never share one between runs."""

    ledger: ProvisioningLedger
    pricing: PricingAccumulator = field(default_factory=PricingAccumulator)
    provisioned: list[ProvisionedCode] = field(default_factory=list["ProvisionedCode"])

    def rollback(self) -> int:
        return self.ledger.rollback()
