"""Query lifecycle runner for Athena Query.

Submits a query, polls the execution until it reaches a terminal state,
then streams result pages through a caller-supplied batch consumer. The
first row of the first page is the header; its values name the fields of
every record on every page.

A QueryRunner executes exactly one query. Build a new one per query.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import TYPE_CHECKING, Any

import sentry_sdk

from athena_query.core.exceptions import (
    ExecutionFailedError,
    PollTimeoutError,
    RetrievalError,
    ReuseError,
    SubmissionError,
)
from athena_query.core.logging import get_logger
from athena_query.core.models import (
    ExecutionState,
    QueryResult,
    RunSummary,
    is_terminal_state,
)
from athena_query.core.records import field_names_from_header, rows_to_records

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from athena_query.core.models import FieldNames, Record, ResultPage, StatusResponse
    from athena_query.core.service import QueryService

    BatchConsumer = Callable[[list[Record]], Awaitable[None] | None]
    SleepFunc = Callable[[float], Awaitable[Any]]

DEFAULT_POLL_INTERVAL = 0.5


class QueryRunner:
    """Single-use driver for one query: submit, poll, then page through results."""

    def __init__(
        self,
        service: QueryService,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: SleepFunc | None = None,
        max_polls: int | None = None,
        timeout: float | None = None,
    ) -> None:
        if poll_interval < 0:
            msg = f"poll_interval must be >= 0, got {poll_interval}"
            raise ValueError(msg)
        if max_polls is not None and max_polls < 1:
            msg = f"max_polls must be >= 1, got {max_polls}"
            raise ValueError(msg)
        if timeout is not None and timeout <= 0:
            msg = f"timeout must be > 0, got {timeout}"
            raise ValueError(msg)

        self.service = service
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.timeout = timeout
        self._sleep: SleepFunc = sleep if sleep is not None else asyncio.sleep
        self._log = get_logger("athena_query.runner")

        self._used = False
        self._execution_handle: str | None = None
        self._field_names: FieldNames | None = None
        self._poll_count = 0
        self._page_count = 0
        self._record_count = 0

    @property
    def execution_handle(self) -> str | None:
        return self._execution_handle

    @property
    def field_names(self) -> FieldNames | None:
        """Field names taken from the header row, None until page 1 arrives."""
        return self._field_names

    def _claim(self) -> None:
        if self._used:
            msg = "QueryRunner can only be used once"
            raise ReuseError(msg)
        self._used = True

    async def run(self, query: str, consumer: BatchConsumer) -> RunSummary:
        """Execute ``query`` and hand every page of records to ``consumer``.

        Raises ReuseError if this runner already started a query. Batches
        delivered before a failure are not taken back.
        """
        self._claim()
        sql_normalized = " ".join(query.split())
        with sentry_sdk.start_span(
            op="athena.query", description=sql_normalized[:100]
        ) as span:
            start_time = time.monotonic()
            execution_handle = await self._submit(query)
            await self.await_completion(execution_handle)
            await self.retrieve_all(execution_handle, consumer)

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("poll_count", self._poll_count)
            span.set_data("page_count", self._page_count)
            span.set_data("record_count", self._record_count)
            span.set_data("duration_ms", duration_ms)

        self._log.debug(
            "query complete",
            execution_handle=execution_handle,
            polls=self._poll_count,
            pages=self._page_count,
            records=self._record_count,
            duration_ms=f"{duration_ms:.1f}",
        )
        return RunSummary(
            execution_handle=execution_handle,
            poll_count=self._poll_count,
            page_count=self._page_count,
            record_count=self._record_count,
            field_names=list(self._field_names or ()),
            duration_ms=duration_ms,
        )

    async def submit(self, query_text: str) -> str:
        """Submit ``query_text`` and return its execution handle."""
        self._claim()
        return await self._submit(query_text)

    async def _submit(self, query_text: str) -> str:
        self._log.debug("submitting query", sql=" ".join(query_text.split()))
        response = await self.service.start_execution(query_text)
        if not response.execution_handle:
            self._log.error("submission returned no execution handle", response=response.raw)
            msg = (
                "Expected an execution handle after submitting the query, "
                f"response={response.raw!r}"
            )
            raise SubmissionError(msg, response=response.raw)

        self._execution_handle = response.execution_handle
        self._log.debug("query submitted", execution_handle=self._execution_handle)
        return self._execution_handle

    async def await_completion(self, execution_handle: str) -> None:
        """Poll until the execution is terminal; raise unless it SUCCEEDED."""
        started_at = time.monotonic()
        response = await self._fetch_status(execution_handle)
        while not is_terminal_state(response.state):
            self._check_poll_budget(execution_handle, response.state, started_at)
            if self.poll_interval > 0:
                await self._sleep(self.poll_interval)
            response = await self._fetch_status(execution_handle)

        if response.state != ExecutionState.SUCCEEDED:
            msg = f"Query {execution_handle} finished in state {response.state}"
            if response.reason:
                msg = f"{msg}: {response.reason}"
            self._log.error(
                "query execution failed",
                execution_handle=execution_handle,
                state=response.state,
                reason=response.reason,
            )
            raise ExecutionFailedError(
                msg, state=response.state, reason=response.reason, response=response.raw
            )

    async def _fetch_status(self, execution_handle: str) -> StatusResponse:
        response = await self.service.get_execution_status(execution_handle)
        self._poll_count += 1
        self._log.debug(
            "execution status",
            execution_handle=execution_handle,
            state=response.state,
            poll=self._poll_count,
        )
        return response

    def _check_poll_budget(
        self, execution_handle: str, state: str | None, started_at: float
    ) -> None:
        if self.max_polls is not None and self._poll_count >= self.max_polls:
            msg = (
                f"Query {execution_handle} still {state} after "
                f"{self._poll_count} status checks"
            )
            self._log.error("poll limit reached", execution_handle=execution_handle)
            raise PollTimeoutError(msg, state=state)
        if self.timeout is not None:
            elapsed = time.monotonic() - started_at
            if elapsed >= self.timeout:
                msg = f"Query {execution_handle} still {state} after {elapsed:.1f}s"
                self._log.error("poll timeout", execution_handle=execution_handle)
                raise PollTimeoutError(msg, state=state)

    async def retrieve_all(self, execution_handle: str, consumer: BatchConsumer) -> None:
        """Fetch every result page in order, delivering each page's records."""
        if self._field_names is not None:
            msg = f"Results for {execution_handle} were already retrieved"
            raise ReuseError(msg)

        page = await self._fetch_page(execution_handle, None)
        rows = page.rows
        self._field_names = field_names_from_header(rows[0]) if rows else ()
        await self._deliver(rows[1:], consumer)

        continuation_token = page.continuation_token
        while continuation_token:
            page = await self._fetch_page(execution_handle, continuation_token)
            await self._deliver(page.rows, consumer)
            continuation_token = page.continuation_token

    async def _fetch_page(
        self, execution_handle: str, continuation_token: str | None
    ) -> ResultPage:
        page = await self.service.get_results_page(execution_handle, continuation_token)
        self._page_count += 1
        if not page.status_ok:
            self._log.error(
                "results page fetch failed",
                execution_handle=execution_handle,
                page=self._page_count,
            )
            msg = (
                f"Fetching results page {self._page_count} for {execution_handle} "
                f"failed, response={page.raw!r}"
            )
            raise RetrievalError(msg, response=page.raw)

        self._log.debug(
            "results page",
            execution_handle=execution_handle,
            page=self._page_count,
            rows=len(page.rows),
            has_more=bool(page.continuation_token),
        )
        return page

    async def _deliver(
        self, rows: Sequence[Sequence[str | None]], consumer: BatchConsumer
    ) -> None:
        records = rows_to_records(rows, self._field_names or ())
        self._record_count += len(records)
        result = consumer(records)
        if inspect.isawaitable(result):
            await result


async def run_query(
    service: QueryService, query: str, consumer: BatchConsumer, **options: Any
) -> RunSummary:
    """Run ``query`` on a fresh QueryRunner built with ``options``."""
    return await QueryRunner(service, **options).run(query, consumer)


async def collect_records(
    service: QueryService, query: str, **options: Any
) -> QueryResult:
    """Run ``query`` and gather every batch into a single QueryResult."""
    records: list[Record] = []
    runner = QueryRunner(service, **options)
    summary = await runner.run(query, records.extend)
    return QueryResult(
        field_names=list(runner.field_names or ()),
        records=records,
        summary=summary,
    )
