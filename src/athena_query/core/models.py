"""Query lifecycle models for Athena Query.

Pydantic models for the responses exchanged with a QueryService and for
the summary returned by QueryRunner.run().
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

Record = dict[str, str | None]
FieldNames = tuple[str, ...]


class ExecutionState(StrEnum):
    """Execution states reported by the query service."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_PENDING_STATES = frozenset({ExecutionState.QUEUED, ExecutionState.RUNNING})


def is_terminal_state(state: str | None) -> bool:
    """Anything that is not QUEUED or RUNNING is terminal, including None."""
    return state not in _PENDING_STATES


class StartResponse(BaseModel):
    """Result of submitting query text."""

    execution_handle: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class StatusResponse(BaseModel):
    """Result of a single status fetch.

    ``state`` is kept as a plain string so values outside ExecutionState
    (TIMED_OUT, future additions) reach the caller unchanged.
    """

    state: str | None = None
    reason: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class ResultPage(BaseModel):
    """One page of positional rows."""

    status_ok: bool = True
    rows: list[list[str | None]] = Field(default_factory=list)
    continuation_token: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class RunSummary(BaseModel):
    """Counters describing a completed run."""

    execution_handle: str
    poll_count: int
    page_count: int
    record_count: int
    field_names: list[str]
    duration_ms: float


class QueryResult(BaseModel):
    """Every record of a run, gathered for formatting."""

    field_names: list[str]
    records: list[Record]
    summary: RunSummary | None = None

    @property
    def row_count(self) -> int:
        return len(self.records)
