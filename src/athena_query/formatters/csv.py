"""CSV formatter for query records (RFC 4180 compliant)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING

from athena_query.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from athena_query.core.models import QueryResult


def _write_row(values: list[str]) -> str:
    buf = StringIO()
    writer = csv.writer(buf)
    writer.writerow(values)
    return buf.getvalue().rstrip("\r\n")


class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, result: QueryResult) -> Iterator[str]:
        if not self.no_header and result.field_names:
            yield _write_row(result.field_names)

        for record in result.records:
            yield _write_row(
                [record.get(name) or "" for name in result.field_names]
            )


registry.register("csv", CSVFormatter)
