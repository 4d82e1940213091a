"""Output formatters for Athena Query."""

from athena_query.formatters.base import Formatter, FormatterRegistry, registry
from athena_query.formatters.csv import CSVFormatter
from athena_query.formatters.json import JSONFormatter
from athena_query.formatters.table import TableFormatter

__all__ = [
    "CSVFormatter",
    "Formatter",
    "FormatterRegistry",
    "JSONFormatter",
    "TableFormatter",
    "registry",
]
