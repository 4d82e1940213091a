"""Athena Query - submit, poll and page through Athena query results."""

from athena_query.__about__ import __version__
from athena_query.core.runner import QueryRunner, collect_records, run_query

__all__ = ["QueryRunner", "__version__", "collect_records", "run_query"]
