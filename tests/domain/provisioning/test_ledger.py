from __future__ import annotations

import logging

import pytest

from scprov.domain.model import EntityKind
from scprov.domain.provisioning import LedgerEntry, ProvisioningLedger
from tests.helpers.provisioning import FakeEntityStore


def _fill(store: FakeEntityStore, ledger: ProvisioningLedger, *kinds: EntityKind) -> None:
    for kind in kinds:
        ledger.record_created(kind, store.create(kind, {}))


def test_rollback_destroys_in_reverse_append_order() -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    _fill(
        store,
        ledger,
        EntityKind.PART,
        EntityKind.LINE_ITEM,
        EntityKind.LINE_ITEM_PART,
        EntityKind.SERVICE_CODE,
        EntityKind.LINE_ITEM_SERVICE_CODE,
    )

    deleted = ledger.rollback()

    assert deleted == 5
    assert store.destroyed == list(reversed(store.created))
    assert ledger.failures == []


def test_rollback_is_best_effort(caplog: pytest.LogCaptureFixture) -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    _fill(store, ledger, EntityKind.PART, EntityKind.LINE_ITEM, EntityKind.LINE_ITEM_PART)
    middle = ledger.entries[1]
    store.fail_destroy[middle.handle] = "still referenced"

    with caplog.at_level(logging.WARNING):
        deleted = ledger.rollback()

    assert deleted == 2
    assert len(store.destroyed) == 3
    assert [failure.entry for failure in ledger.failures] == [middle]
    assert "still referenced" in caplog.text


def test_rollback_survives_a_raising_store() -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    _fill(store, ledger, EntityKind.PART, EntityKind.LINE_ITEM)
    store.raise_on_destroy.add(ledger.entries[-1].handle)

    deleted = ledger.rollback()

    assert deleted == 1
    assert ledger.failures[0].reason == "store went away"


def test_rollback_skips_rows_already_gone(caplog: pytest.LogCaptureFixture) -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    _fill(store, ledger, EntityKind.PART, EntityKind.LINE_ITEM)
    store.destroy(EntityKind.PART, ledger.entries[0].handle)

    with caplog.at_level(logging.INFO):
        deleted = ledger.rollback()

    assert deleted == 1
    assert ledger.failures == []
    assert "Not present in store" in caplog.text


def test_rollback_ignores_entries_not_created() -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    found = store.create(EntityKind.PART, {})
    ledger.append(LedgerEntry(kind=EntityKind.PART, handle=found, was_created=False))

    assert ledger.rollback() == 0
    assert store.destroyed == []
    assert store.count(EntityKind.PART) == 1


def test_rollback_leaves_entries_in_place() -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store)
    _fill(store, ledger, EntityKind.PART)

    ledger.rollback()

    assert len(ledger) == 1
    assert ledger.rollback() == 0


def test_empty_ledger_rollback_is_a_no_op() -> None:
    store = FakeEntityStore()

    assert ProvisioningLedger(store).rollback() == 0
    assert store.destroyed == []


def test_injected_logger_receives_rollback_messages(caplog: pytest.LogCaptureFixture) -> None:
    store = FakeEntityStore()
    ledger = ProvisioningLedger(store, logger=logging.getLogger("custom.ledger"))

    with caplog.at_level(logging.INFO, logger="custom.ledger"):
        ledger.rollback()

    assert {record.name for record in caplog.records} == {"custom.ledger"}
