"""Application service for onboarding a whole data source in one run."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from scprov.domain.provisioning import CreationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scprov.domain.ports.fetching import ServiceCodeRecord
    from scprov.domain.provisioning import (
        PriceVersion,
        PriceVersionBuilder,
        ProvisioningEngine,
        RunContext,
    )

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordFailure:
    code: str
    error: CreationError


@dataclass(slots=True)
class OnboardingResult:
    """Outcome of one onboarding run. ``run`` stays usable for rollback."""

    run: RunContext
    processed: int = 0
    failures: list[RecordFailure] = field(default_factory=list["RecordFailure"])
    version: PriceVersion | None = None

    @property
    def created(self) -> int:
        return len(self.run.ledger)

    @property
    def failed(self) -> int:
        return len(self.failures)


def onboard_service_codes(
    records: Iterable[ServiceCodeRecord],
    *,
    engine: ProvisioningEngine,
    pricing: PriceVersionBuilder | None = None,
    pay_grade_type: str | None = None,
    stop_on_error: bool = False,
    run: RunContext | None = None,
) -> OnboardingResult:
    """Process every record, then price the run once.

    A ``CreationError`` for one record is logged and the run moves on, unless
    ``stop_on_error`` is set. Setup and pricing-precondition errors always
    propagate. Nothing is rolled back here; the caller holds ``result.run``.
    """

    active_run = run or engine.start_run()
    result = OnboardingResult(run=active_run)

    for record in records:
        try:
            engine.process(active_run, record.code, record.cost, record.kind)
        except CreationError as exc:
            if stop_on_error:
                raise
            log.error("Failed to onboard %s: %s", record.code, exc)  # noqa: TRY400
            result.failures.append(RecordFailure(code=record.code, error=exc))
            continue
        result.processed += 1

    if pricing is None:
        return result

    if not len(active_run.pricing):
        log.info("Nothing to price; skipping price version")
        return result

    anchor = pricing.latest_anchor(
        engine.provider_id,
        pay_grade_type or engine.config.effective_pay_grade_type,
    )
    result.version = pricing.build_version(active_run, anchor)
    return result
