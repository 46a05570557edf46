"""Read service codes and costs from a CSV file."""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from scprov.adapters.price_file.schema import ServiceCodeRow
from scprov.domain.ports.fetching import ServiceCodeRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from pathlib import Path

log = logging.getLogger(__name__)


class DataSourceError(ValueError):
    """Raised when the input file cannot be turned into records."""


def curate_rows(rows: Iterable[ServiceCodeRow]) -> list[ServiceCodeRecord]:
    """Keep the highest-cost row per code and sort the survivors by code.

    Price files list a code once per price tier; only the top tier is onboarded.
    Ties keep the row seen first.
    """

    best: dict[str, ServiceCodeRow] = {}
    for row in rows:
        current = best.get(row.number)
        if current is None or current.cost < row.cost:
            best[row.number] = row
    return [
        ServiceCodeRecord(code=row.number, cost=row.cost, kind=row.type)
        for _, row in sorted(best.items())
    ]


class CsvServiceCodeSource:
    """Restartable iterable of curated records; the file is read on every pass."""

    def __init__(self, path: Path, *, encoding: str = "utf-8-sig") -> None:
        self.path = path
        self.encoding = encoding

    def __iter__(self) -> Iterator[ServiceCodeRecord]:
        return iter(self.records())

    def records(self) -> list[ServiceCodeRecord]:
        rows = list(self._read_rows())
        curated = curate_rows(rows)
        log.info(
            "Loaded %s rows (%s distinct codes) from %s", len(rows), len(curated), self.path
        )
        return curated

    def _read_rows(self) -> Iterator[ServiceCodeRow]:
        try:
            handle = self.path.open(newline="", encoding=self.encoding)
        except OSError as exc:
            raise DataSourceError(f"Cannot read {self.path}: {exc}") from exc

        with handle:
            reader = csv.DictReader(handle)
            if reader.fieldnames is None or not {"number", "cost"} <= set(reader.fieldnames):
                raise DataSourceError(f"{self.path} needs a header with 'number' and 'cost'")
            for raw in reader:
                yield _parse_row(raw, line=reader.line_num, path=self.path)


def _parse_row(raw: Mapping[str | None, object], *, line: int, path: Path) -> ServiceCodeRow:
    try:
        return ServiceCodeRow.model_validate({key: value for key, value in raw.items() if key})
    except ValidationError as exc:
        raise DataSourceError(f"{path}:{line}: {exc.errors()[0]['msg']}") from exc
