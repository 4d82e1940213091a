"""Exception hierarchy for Athena Query.

All exceptions carry an exit_code for CLI return value mapping.
Every error is fatal to the run that raised it; nothing is retried.
"""

from __future__ import annotations

from typing import Any

from athena_query.core.exit_codes import ExitCode


class AthenaQueryError(Exception):
    """Base exception for all Athena Query errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ReuseError(AthenaQueryError):
    """A QueryRunner was asked to run a second query."""

    exit_code: int = ExitCode.USAGE_ERROR


class SubmissionError(AthenaQueryError):
    """The service accepted the query but returned no execution handle."""

    exit_code: int = ExitCode.QUERY_FAILED

    def __init__(self, message: str, response: dict[str, Any] | None = None) -> None:
        self.response = response or {}
        super().__init__(message)


class ExecutionFailedError(AthenaQueryError):
    """The execution reached a terminal state other than SUCCEEDED."""

    exit_code: int = ExitCode.QUERY_FAILED

    def __init__(
        self,
        message: str,
        state: str | None,
        reason: str | None = None,
        response: dict[str, Any] | None = None,
    ) -> None:
        self.state = state
        self.reason = reason
        self.response = response or {}
        super().__init__(message)


class PollTimeoutError(ExecutionFailedError):
    """Polling gave up before the execution reached a terminal state."""

    exit_code: int = ExitCode.TIMEOUT


class RetrievalError(AthenaQueryError):
    """A results page fetch reported a non-ok status."""

    exit_code: int = ExitCode.RESULT_ERROR

    def __init__(self, message: str, response: dict[str, Any] | None = None) -> None:
        self.response = response or {}
        super().__init__(message)


class SchemaMismatchError(AthenaQueryError):
    """A data row has more values than the header row has names."""

    exit_code: int = ExitCode.RESULT_ERROR


class NetworkError(AthenaQueryError):
    """Transport failures, unreachable endpoint, rejected API call."""

    exit_code: int = ExitCode.NETWORK_ERROR


class InputError(AthenaQueryError):
    """File not found, empty query, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class ConfigError(AthenaQueryError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR
