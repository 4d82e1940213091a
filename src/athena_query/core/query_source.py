"""Query source resolution for Athena Query.

The SQL text comes from the -e option, else a file path, else stdin.
"""

from __future__ import annotations

import sys
from pathlib import Path

from athena_query.core.exceptions import InputError


def _require_text(sql: str, source: str) -> str:
    if not sql.strip():
        msg = f"Query from {source} is empty."
        raise InputError(msg)
    return sql


def resolve_query_source(
    inline: str | None,
    file_path: str | None,
) -> str:
    """Resolve SQL query from inline, file, or stdin.

    Precedence: inline > file > stdin.
    Raises InputError when no source is available or the query is blank.
    """
    if inline is not None:
        return _require_text(inline, "-e")

    if file_path is not None:
        p = Path(file_path)
        if not p.is_file():
            msg = (
                f"Query file not found: {file_path}\n"
                "Use -e for inline queries or pipe query via stdin."
            )
            raise InputError(msg)
        return _require_text(p.read_text(), file_path)

    if not sys.stdin.isatty():
        return _require_text(sys.stdin.read(), "stdin")

    msg = "No query provided. Use -e, file path, or pipe to stdin."
    raise InputError(msg)
