"""Header extraction and positional-to-named row conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from athena_query.core.exceptions import SchemaMismatchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from athena_query.core.models import FieldNames, Record


def field_names_from_header(header: Sequence[str | None]) -> FieldNames:
    """Name every header cell, using ``col<index>`` where the value is absent.

    An empty-string cell is present, so it stays as the name ``""``.
    """
    return tuple(
        f"col{index}" if value is None else value for index, value in enumerate(header)
    )


def row_to_record(row: Sequence[str | None], field_names: FieldNames) -> Record:
    if len(row) > len(field_names):
        msg = (
            f"Header row is not long enough: row has {len(row)} values, "
            f"header has {len(field_names)} names"
        )
        raise SchemaMismatchError(msg)
    return {field_names[index]: value for index, value in enumerate(row)}


def rows_to_records(
    rows: Sequence[Sequence[str | None]], field_names: FieldNames
) -> list[Record]:
    return [row_to_record(row, field_names) for row in rows]
