"""Turn a run's accumulated costs into one new dated price version."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from logging import Logger, getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from scprov.domain.model import EntityKind
from scprov.domain.provisioning.errors import PricingPreconditionError
from scprov.domain.provisioning.ledger import LedgerEntry

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date
    from decimal import Decimal
    from uuid import UUID

    from scprov.domain.ports.persistence import PayGradeRepository, VersionAnchor
    from scprov.domain.provisioning.context import RunContext

log = getLogger(__name__)

VERSION_STEP = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class PriceVersion:
    handle: UUID
    effective_date: date
    amounts: Mapping[UUID, Decimal]


class PriceVersionBuilder:
    """Derives the next version of a pay grade from the run's pricing accumulator.

    Versioning itself belongs to the store; the builder only picks the date and
    supplies the changed amounts.
    """

    def __init__(self, pay_grades: PayGradeRepository, *, logger: Logger | None = None) -> None:
        self._pay_grades = pay_grades
        self._log = logger or log

    def latest_anchor(self, provider_id: UUID, pay_grade_type: str) -> VersionAnchor | None:
        """Return the newest version of the provider's ``pay_grade_type`` pay grade."""

        pay_grade = self._pay_grades.pay_grade_for(provider_id, pay_grade_type)
        if pay_grade is None:
            raise PricingPreconditionError(
                f"no {pay_grade_type!r} pay grade for provider {provider_id}"
            )
        return self._pay_grades.latest_version(pay_grade)

    def build_version(self, run: RunContext, anchor: VersionAnchor | None) -> PriceVersion:
        if anchor is None:
            raise PricingPreconditionError(
                "no prior price version to anchor against; create the first one out of band"
            )

        effective_date = anchor.effective_date + VERSION_STEP
        amounts = run.pricing.amounts()
        handle = self._pay_grades.derive_new_version(anchor.handle, effective_date, amounts)
        run.ledger.append(LedgerEntry(kind=EntityKind.PRICE_VERSION, handle=handle))
        self._log.info(
            "Created price version %s effective %s with %s amounts",
            handle,
            effective_date,
            len(amounts),
        )
        return PriceVersion(
            handle=handle,
            effective_date=effective_date,
            amounts=MappingProxyType(amounts),
        )
