"""Price-file adapter: CSV service-code price lists as a record source."""

from __future__ import annotations

from .schema import ServiceCodeRow
from .source import CsvServiceCodeSource, DataSourceError, curate_rows

__all__ = ["CsvServiceCodeSource", "DataSourceError", "ServiceCodeRow", "curate_rows"]
