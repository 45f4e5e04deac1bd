"""
Failure taxonomy for Battle.net API calls.

Every failure the executor can observe is an ``ApiError`` tagged with
``transient``.  Transient failures are retried under the configured
``RetryPolicy``; permanent ones (e.g. a non-existent item id returning 404)
are raised to the caller on first sight.

  TransportFailure  - connection refused, DNS, socket timeout       (transient)
  UpstreamFailure   - non-2xx status; permanent for 400/401/403/404/410
  ReadFailure       - body could not be consumed or decoded as text  (transient)
  DecodeFailure     - payload did not match the expected model       (transient)
  RetriesExhausted  - the policy's retry ceiling was reached
"""

from __future__ import annotations

from typing import Optional

PERMANENT_STATUS_CODES = frozenset({400, 401, 403, 404, 410})


class ApiError(RuntimeError):
    """Base class for all request failures.

    Attributes:
        task:      Human-readable label of the request (e.g. ``"item info 19019"``).
        url:       URL that was requested (credentials stripped).
        transient: Whether retrying the identical request may succeed.
    """

    transient: bool = True

    def __init__(self, task: str, url: str, detail: str) -> None:
        self.task   = task
        self.url    = url
        self.detail = detail
        super().__init__(f"{task}: {detail}")


class TransportFailure(ApiError):
    """The request never produced a response."""


class UpstreamFailure(ApiError):
    """The server answered with a non-success status code.

    Attributes:
        status_code: HTTP status returned by the server.
    """

    def __init__(self, task: str, url: str, status_code: int) -> None:
        self.status_code = status_code
        self.transient   = status_code not in PERMANENT_STATUS_CODES
        super().__init__(task, url, f"HTTP {status_code}")


class ReadFailure(ApiError):
    """The response body could not be read."""


class DecodeFailure(ApiError):
    """The body was read but did not validate against the expected model."""


class RetriesExhausted(ApiError):
    """Raised when transient failures outlast the retry policy.

    Attributes:
        attempts:   Number of requests issued.
        last_error: The final transient failure observed.
    """

    transient = False

    def __init__(self, task: str, url: str, attempts: int, last_error: Optional[ApiError]) -> None:
        self.attempts   = attempts
        self.last_error = last_error
        super().__init__(
            task, url, f"giving up after {attempts} attempt(s); last error: {last_error}"
        )


class MissingCredentialsError(RuntimeError):
    """Raised when no API key is configured.

    Attributes:
        env_var: Name of the environment variable that was checked.
    """

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"{env_var} is not set.  Add it to .env or export it before calling the API."
        )
