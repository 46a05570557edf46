"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from scprov.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProvisioningUnitOfWork,
    is_started,
    startup,
)
from scprov.config import get_provisioning_config
from scprov.domain.onboarding import onboard_service_codes
from scprov.domain.ports.unit_of_work import ProvisioningUnitOfWork
from scprov.domain.provisioning import PriceVersionBuilder, ProvisioningEngine

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from scprov.config import ProvisioningConfig
    from scprov.domain.ports.fetching import ServiceCodeSource
    from scprov.domain.provisioning import RunContext

UnitOfWorkFactory = Callable[[], ProvisioningUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class ProvisioningSummary:
    """What one run did, after any rollback."""

    processed: int
    failed: int
    created: int
    version_id: UUID | None = None
    effective_date: date | None = None
    rolled_back: int | None = None
    rollback_failures: int = 0


def provision_service_codes(
    source: ServiceCodeSource,
    *,
    config: ProvisioningConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    price: bool = True,
    stop_on_error: bool = False,
    rehearse: bool = False,
    rollback_on_error: bool = False,
) -> ProvisioningSummary:
    """Onboard every record of ``source`` using the configured adapters.

    ``rehearse`` rolls the whole run back once it finishes, or as soon as it
    aborts. ``rollback_on_error`` does so only when a record failed or the run
    aborted.
    """

    effective_config = config or get_provisioning_config()
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyProvisioningUnitOfWork

    log.info(
        "Starting provisioning: provider=%s, service_code_type=%s, default_kind=%s, price=%s",
        effective_config.provider_name,
        effective_config.service_code_type,
        effective_config.default_kind,
        price,
    )

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        engine = ProvisioningEngine(repositories, effective_config)
        run = engine.start_run()
        try:
            result = onboard_service_codes(
                source,
                engine=engine,
                pricing=PriceVersionBuilder(repositories.pay_grades) if price else None,
                pay_grade_type=effective_config.effective_pay_grade_type,
                stop_on_error=stop_on_error,
                run=run,
            )
        except Exception:
            if rollback_on_error or rehearse:
                log.warning("Run aborted; rolling back %s created rows", len(run.ledger))
                run.rollback()
            raise

        summary = ProvisioningSummary(
            processed=result.processed,
            failed=result.failed,
            created=result.created,
            version_id=result.version.handle if result.version else None,
            effective_date=result.version.effective_date if result.version else None,
        )
        if rehearse or (rollback_on_error and result.failures):
            summary.rolled_back = _rollback(run)
            summary.rollback_failures = len(run.ledger.failures)
        uow.commit()

    log.info(
        "Finished provisioning: processed=%s, failed=%s, created=%s, version=%s, rolled_back=%s",
        summary.processed,
        summary.failed,
        summary.created,
        summary.version_id,
        summary.rolled_back,
    )
    return summary


def _rollback(run: RunContext) -> int:
    log.info("Rolling back run (%s ledger entries)", len(run.ledger))
    return run.rollback()
