"""Query service protocol.

QueryRunner talks to the execution service only through these three
coroutines. AthenaService implements them over boto3; ScriptedQueryService
in athena_query.testing replays canned responses for tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from athena_query.core.models import ResultPage, StartResponse, StatusResponse


@runtime_checkable
class QueryService(Protocol):
    """Capability interface of a poll-based query execution service."""

    async def start_execution(self, query_text: str) -> StartResponse:
        """Submit query text and return the service's start response."""
        ...

    async def get_execution_status(self, execution_handle: str) -> StatusResponse:
        """Fetch the current state of an execution."""
        ...

    async def get_results_page(
        self, execution_handle: str, continuation_token: str | None = None
    ) -> ResultPage:
        """Fetch one page of results, the first page when no token is given."""
        ...
