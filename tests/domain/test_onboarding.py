from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from scprov.domain.model import EntityKind
from scprov.domain.onboarding import onboard_service_codes
from scprov.domain.ports.fetching import ServiceCodeRecord
from scprov.domain.provisioning import (
    CreationError,
    PriceVersionBuilder,
    PricingPreconditionError,
    ProvisioningEngine,
    SetupError,
)
from tests.helpers.provisioning import FakeProvisioningBackend, make_config


def _records(*pairs: tuple[str, str]) -> list[ServiceCodeRecord]:
    return [ServiceCodeRecord(code=code, cost=Decimal(cost)) for code, cost in pairs]


def test_onboard_processes_records_and_prices_once(backend: FakeProvisioningBackend) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())

    result = onboard_service_codes(
        _records(("SC-100", "9.99"), ("SC-200", "5.00")),
        engine=engine,
        pricing=PriceVersionBuilder(backend.pay_grades),
    )

    assert result.processed == 2
    assert result.failed == 0
    assert result.created == 11
    assert result.version is not None
    assert result.version.effective_date == date(2024, 1, 2)
    assert len(backend.pay_grades.derived) == 1


def test_onboard_without_pricing_creates_no_version(backend: FakeProvisioningBackend) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())

    result = onboard_service_codes(_records(("SC-100", "9.99")), engine=engine)

    assert result.version is None
    assert result.created == 5
    assert backend.pay_grades.derived == []


def test_onboard_skips_pricing_when_nothing_accumulated(
    backend: FakeProvisioningBackend, caplog: pytest.LogCaptureFixture
) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())

    with caplog.at_level(logging.INFO):
        result = onboard_service_codes(
            [], engine=engine, pricing=PriceVersionBuilder(backend.pay_grades)
        )

    assert result.version is None
    assert backend.pay_grades.derived == []
    assert "Nothing to price" in caplog.text


def test_onboard_collects_creation_failures(
    backend: FakeProvisioningBackend, caplog: pytest.LogCaptureFixture
) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())
    backend.entities.fail_create.add(EntityKind.SERVICE_CODE)

    with caplog.at_level(logging.ERROR):
        result = onboard_service_codes(_records(("SC-100", "1"), ("SC-200", "2")), engine=engine)

    assert result.processed == 0
    assert [failure.code for failure in result.failures] == ["SC-100", "SC-200"]
    assert all(isinstance(failure.error, CreationError) for failure in result.failures)
    assert "Failed to onboard SC-100" in caplog.text
    assert result.run.rollback() == 6


def test_onboard_stop_on_error_reraises(backend: FakeProvisioningBackend) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())
    backend.entities.fail_create.add(EntityKind.LINE_ITEM)
    run = engine.start_run()

    with pytest.raises(CreationError):
        onboard_service_codes(
            _records(("SC-100", "1"), ("SC-200", "2")),
            engine=engine,
            stop_on_error=True,
            run=run,
        )

    assert [entry.kind for entry in run.ledger] == [EntityKind.PART]


def test_onboard_setup_errors_always_propagate(backend: FakeProvisioningBackend) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())

    with pytest.raises(SetupError):
        onboard_service_codes(
            [ServiceCodeRecord(code="LB-1", cost=Decimal(1), kind="Labor")], engine=engine
        )


def test_onboard_needs_a_prior_version(backend: FakeProvisioningBackend) -> None:
    engine = ProvisioningEngine(backend.repositories, make_config())
    backend.pay_grades.versions.clear()
    run = engine.start_run()

    with pytest.raises(PricingPreconditionError):
        onboard_service_codes(
            _records(("SC-100", "1")),
            engine=engine,
            pricing=PriceVersionBuilder(backend.pay_grades),
            run=run,
        )

    assert len(run.ledger) == 5
