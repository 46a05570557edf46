"""Ordered record of what a run created, and the compensating rollback."""

from __future__ import annotations

from dataclasses import dataclass
from logging import Logger, getLogger
from typing import TYPE_CHECKING

from scprov.domain.ports.persistence import DestroyStatus
from scprov.domain.provisioning.errors import RollbackEntryError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

    from scprov.domain.model import EntityKind
    from scprov.domain.ports.persistence import EntityStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    kind: EntityKind
    handle: UUID
    was_created: bool = True


class ProvisioningLedger:
    """Entries in creation order; rollback walks them newest first.

    Link rows reference the rows created before them, so deleting in creation
    order would trip foreign keys. A ledger belongs to exactly one run.
    """

    def __init__(self, store: EntityStore, *, logger: Logger | None = None) -> None:
        self._store = store
        self._entries: list[LedgerEntry] = []
        self._log = logger or log
        self.failures: list[RollbackEntryError] = []

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        self._entries.append(entry)
        return entry

    def record_created(self, kind: EntityKind, handle: UUID) -> LedgerEntry:
        return self.append(LedgerEntry(kind=kind, handle=handle, was_created=True))

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(tuple(self._entries))

    def rollback(self) -> int:
        """Destroy every created entry, newest first, and return how many went.

        Failures are logged and collected in ``failures``; they never stop the
        remaining deletes. Rows that are already gone are skipped. The ledger
        itself is left intact.
        """

        self._log.info("Rolling back %s ledger entries", len(self._entries))
        operation_count = 0
        for entry in reversed(self._entries):
            if not entry.was_created:
                continue
            self._log.debug("Destroying %s %s", entry.kind, entry.handle)
            try:
                result = self._store.destroy(entry.kind, entry.handle)
            except Exception as exc:  # noqa: BLE001
                self._record_failure(entry, str(exc) or type(exc).__name__)
                continue

            if result.status is DestroyStatus.DELETED:
                operation_count += 1
            elif result.status is DestroyStatus.NOT_FOUND:
                self._log.info("Not present in store, skipping %s %s", entry.kind, entry.handle)
            else:
                self._record_failure(entry, result.reason or "unknown failure")

        self._log.info(
            "Rollback finished: deleted=%s, failed=%s", operation_count, len(self.failures)
        )
        return operation_count

    def _record_failure(self, entry: LedgerEntry, reason: str) -> None:
        error = RollbackEntryError(entry, reason)
        self.failures.append(error)
        self._log.warning("%s", error)
