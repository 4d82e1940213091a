"""AWS Athena transport for Athena Query.

Implements the QueryService protocol over a synchronous boto3 Athena
client. Each boto3 call runs in a worker thread through asyncio.to_thread
so the event loop stays free while a round trip is in flight.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from athena_query.core.exceptions import NetworkError
from athena_query.core.models import ResultPage, StartResponse, StatusResponse

if TYPE_CHECKING:
    from athena_query.core.config import ResolvedConfig


def _http_status(response: dict[str, Any]) -> int | None:
    return response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def _rows_from_result_set(response: dict[str, Any]) -> list[list[str | None]]:
    rows = response.get("ResultSet", {}).get("Rows") or []
    return [
        [datum.get("VarCharValue") for datum in row.get("Data") or []] for row in rows
    ]


class AthenaService:
    """QueryService backed by Athena query executions."""

    def __init__(
        self,
        client: Any,
        *,
        workgroup: str | None = None,
        output_location: str | None = None,
        database: str | None = None,
        catalog: str | None = None,
        page_size: int | None = None,
    ) -> None:
        self._client = client
        self.workgroup = workgroup
        self.output_location = output_location
        self.database = database
        self.catalog = catalog
        self.page_size = page_size

    @classmethod
    def from_config(cls, config: ResolvedConfig) -> AthenaService:
        """Build a boto3 Athena client from resolved settings."""
        import boto3

        try:
            session = boto3.Session(
                profile_name=config.aws_profile, region_name=config.region
            )
            client = session.client("athena")
        except BotoCoreError as e:
            msg = f"Could not create Athena client: {e}"
            raise NetworkError(msg) from e

        return cls(
            client,
            workgroup=config.workgroup,
            output_location=config.output_location,
            database=config.database,
            catalog=config.catalog,
            page_size=config.page_size,
        )

    def _start_kwargs(self, query_text: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"QueryString": query_text}
        context: dict[str, str] = {}
        if self.database:
            context["Database"] = self.database
        if self.catalog:
            context["Catalog"] = self.catalog
        if context:
            kwargs["QueryExecutionContext"] = context
        if self.workgroup:
            kwargs["WorkGroup"] = self.workgroup
        if self.output_location:
            kwargs["ResultConfiguration"] = {"OutputLocation": self.output_location}
        return kwargs

    async def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        method = getattr(self._client, operation)
        try:
            return await asyncio.to_thread(method, **kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            msg = f"Athena {operation} failed: {error.get('Code')}: {error.get('Message')}"
            raise NetworkError(msg) from e
        except BotoCoreError as e:
            msg = f"Athena {operation} failed: {e}"
            raise NetworkError(msg) from e

    async def start_execution(self, query_text: str) -> StartResponse:
        response = await self._call(
            "start_query_execution", **self._start_kwargs(query_text)
        )
        return StartResponse(
            execution_handle=response.get("QueryExecutionId"), raw=response
        )

    async def get_execution_status(self, execution_handle: str) -> StatusResponse:
        response = await self._call(
            "get_query_execution", QueryExecutionId=execution_handle
        )
        status = response.get("QueryExecution", {}).get("Status", {})
        return StatusResponse(
            state=status.get("State"),
            reason=status.get("StateChangeReason"),
            raw=response,
        )

    async def get_results_page(
        self, execution_handle: str, continuation_token: str | None = None
    ) -> ResultPage:
        kwargs: dict[str, Any] = {"QueryExecutionId": execution_handle}
        if continuation_token:
            kwargs["NextToken"] = continuation_token
        if self.page_size:
            kwargs["MaxResults"] = self.page_size

        try:
            response = await asyncio.to_thread(self._client.get_query_results, **kwargs)
        except ClientError as e:
            # Reported as a failed page so the runner raises RetrievalError.
            return ResultPage(status_ok=False, raw=e.response)
        except BotoCoreError as e:
            msg = f"Athena get_query_results failed: {e}"
            raise NetworkError(msg) from e

        return ResultPage(
            status_ok=_http_status(response) == 200,
            rows=_rows_from_result_set(response),
            continuation_token=response.get("NextToken") or None,
            raw=response,
        )
