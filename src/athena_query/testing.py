"""Scripted QueryService for tests.

Each expected call pairs the arguments the runner must send with the
response to replay. Calls are checked in order per operation, and
assert_finished() fails if any scripted call was never made.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from athena_query.core.models import ResultPage, StartResponse, StatusResponse


@dataclass
class ExpectedCall:
    args: tuple[Any, ...]
    response: Any


@dataclass
class ScriptedQueryService:
    """Replays canned responses and asserts the arguments of every call."""

    starts: deque[ExpectedCall] = field(default_factory=deque)
    statuses: deque[ExpectedCall] = field(default_factory=deque)
    pages: deque[ExpectedCall] = field(default_factory=deque)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def expect_start(
        self, query_text: str, execution_handle: str | None, **raw: Any
    ) -> ScriptedQueryService:
        raw.setdefault("QueryExecutionId", execution_handle)
        response = StartResponse(execution_handle=execution_handle, raw=raw)
        self.starts.append(ExpectedCall((query_text,), response))
        return self

    def expect_status(
        self, execution_handle: str, *states: str | None, reason: str | None = None
    ) -> ScriptedQueryService:
        """Script one status fetch per state, in order."""
        for state in states:
            response = StatusResponse(state=state, reason=reason, raw={"State": state})
            self.statuses.append(ExpectedCall((execution_handle,), response))
        return self

    def expect_page(
        self,
        execution_handle: str,
        rows: list[list[str | None]],
        *,
        token: str | None = None,
        next_token: str | None = None,
        status_ok: bool = True,
    ) -> ScriptedQueryService:
        """Script a page fetched with ``token`` that returns ``next_token``."""
        response = ResultPage(
            status_ok=status_ok,
            rows=rows,
            continuation_token=next_token,
            raw={"NextToken": next_token, "ok": status_ok},
        )
        self.pages.append(ExpectedCall((execution_handle, token), response))
        return self

    @staticmethod
    def _next(queue: deque[ExpectedCall], operation: str, args: tuple[Any, ...]) -> Any:
        if not queue:
            msg = f"Unexpected {operation}{args!r}: no more scripted calls"
            raise AssertionError(msg)
        expected = queue.popleft()
        if expected.args != args:
            msg = f"{operation} called with {args!r}, expected {expected.args!r}"
            raise AssertionError(msg)
        return expected.response

    async def start_execution(self, query_text: str) -> StartResponse:
        self.calls.append(("start_execution", (query_text,)))
        return self._next(self.starts, "start_execution", (query_text,))

    async def get_execution_status(self, execution_handle: str) -> StatusResponse:
        self.calls.append(("get_execution_status", (execution_handle,)))
        return self._next(self.statuses, "get_execution_status", (execution_handle,))

    async def get_results_page(
        self, execution_handle: str, continuation_token: str | None = None
    ) -> ResultPage:
        args = (execution_handle, continuation_token)
        self.calls.append(("get_results_page", args))
        return self._next(self.pages, "get_results_page", args)

    def assert_finished(self) -> None:
        leftover = {
            "start_execution": len(self.starts),
            "get_execution_status": len(self.statuses),
            "get_results_page": len(self.pages),
        }
        pending = {name: count for name, count in leftover.items() if count}
        if pending:
            msg = f"Scripted calls never made: {pending}"
            raise AssertionError(msg)
