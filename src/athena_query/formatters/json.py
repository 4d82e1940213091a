"""JSON formatter for query records."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from athena_query.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from athena_query.core.models import QueryResult


class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: QueryResult) -> Iterator[str]:
        # Short rows leave trailing fields out of the record; emit them as null.
        rows = [
            {name: record.get(name) for name in result.field_names}
            for record in result.records
        ]
        if self.compact:
            yield json.dumps(rows, separators=(",", ":"))
        else:
            yield json.dumps(rows, indent=2)


registry.register("json", JSONFormatter)
