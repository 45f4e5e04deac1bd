"""
Request executor: throttled GET → status check → read → repair → decode.

One call to :meth:`RequestExecutor.fetch` performs, per attempt:

  1. Acquire a permit from the shared ``RateLimiter``.
  2. Issue the GET.                      httpx.RequestError   → TransportFailure
  3. Check the status.                   non-2xx              → UpstreamFailure
  4. Read the full body as text.         read or decompress   → ReadFailure
  5. Apply the caller's sanitizer, if any (listings only).
  6. Validate into the caller's model.   ValidationError      → DecodeFailure

Transient failures are logged with the task label and retry number and the
attempt restarts from step 1 after the policy's backoff delay.  Permanent
failures (see ``errors.PERMANENT_STATUS_CODES``) are raised immediately.  Once
the policy's ``max_retries`` is spent, ``RetriesExhausted`` is raised.

Retrying a decode failure with an identical request only helps because the
upstream payload differs between polls (the corrupt ``owner`` text is not
deterministic), which is why decode failures are classed transient.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from wow_ah_client.client.errors import (
    ApiError,
    DecodeFailure,
    ReadFailure,
    RetriesExhausted,
    TransportFailure,
    UpstreamFailure,
)
from wow_ah_client.client.rate_limiter import RateLimiter
from wow_ah_client.client.retry import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class RequestExecutor:
    """Fetch-and-decode with rate limiting and classified retries.

    Args:
        http:         ``httpx.Client`` used for every request.  Socket-level
                      timeouts are configured on it, not here.
        rate_limiter: Shared limiter; one instance per API key.
        retry_policy: Backoff schedule and retry ceiling.
        sleep:        Delay function between retries (injectable for tests).
        rng:          Random source for jitter (injectable for tests).
    """

    def __init__(
        self,
        http: httpx.Client,
        rate_limiter: RateLimiter,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.http         = http
        self.rate_limiter = rate_limiter
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep       = sleep
        self._rng         = rng

    def fetch(
        self,
        url: str,
        model: type[T],
        task: str,
        params: Optional[Mapping[str, Any]] = None,
        sanitizer: Optional[Callable[[str], str]] = None,
    ) -> T:
        """Download ``url`` and validate the body as ``model``.

        Args:
            url:       Target URL, without credentials.
            model:     Pydantic model the JSON body must validate against.
            task:      Label used in log lines and errors.
            params:    Query parameters (locale, apikey, ...).  Never logged.
            sanitizer: Optional text repair applied to the body before decoding.

        Returns:
            The validated model instance.

        Raises:
            ApiError:         A permanent failure (``transient`` is False).
            RetriesExhausted: Transient failures outlasted ``max_retries``.
        """
        retries = 0
        while True:
            try:
                return self._attempt(url, model, task, params, sanitizer)
            except ApiError as exc:
                fields = _log_fields(task, retries, exc)
                if not exc.transient:
                    logger.error(
                        "Permanent failure for %s: %s. Not retrying.", task, exc.detail,
                        extra=fields,
                    )
                    raise
                if not self.retry_policy.allows_retry(retries):
                    logger.error(
                        "Error downloading %s: %s. Giving up after %d retries.",
                        task, exc.detail, retries,
                        extra=fields,
                    )
                    raise RetriesExhausted(task, url, retries + 1, exc) from exc
                retries += 1
                delay = self.retry_policy.delay_for(retries, self._rng)
                logger.warning(
                    "Error downloading %s: %s. Retry %d in %.2fs.",
                    task, exc.detail, retries, delay,
                    extra=dict(fields, retry=retries, delay=round(delay, 3)),
                )
                if delay > 0:
                    self._sleep(delay)

    # ── Single attempt ─────────────────────────────────────────────────────────

    def _attempt(
        self,
        url: str,
        model: type[T],
        task: str,
        params: Optional[Mapping[str, Any]],
        sanitizer: Optional[Callable[[str], str]],
    ) -> T:
        self.rate_limiter.acquire()
        try:
            with self.http.stream("GET", url, params=params) as response:
                text = self._read_body(response, task, url)
        except httpx.RequestError as exc:
            raise TransportFailure(task, url, str(exc) or type(exc).__name__) from exc

        if sanitizer is not None:
            text = sanitizer(text)

        try:
            return model.model_validate_json(text)
        except ValidationError as exc:
            raise DecodeFailure(
                task, url, f"{exc.error_count()} validation error(s): {_first_error(exc)}"
            ) from exc

    @staticmethod
    def _read_body(response: httpx.Response, task: str, url: str) -> str:
        if not response.is_success:
            raise UpstreamFailure(task, url, response.status_code)
        try:
            response.read()
            return response.text
        except (httpx.RequestError, httpx.StreamError, UnicodeDecodeError) as exc:
            raise ReadFailure(task, url, str(exc) or type(exc).__name__) from exc


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
    return f"{loc}: {err.get('msg', '')}"


def _log_fields(task: str, retries: int, exc: ApiError) -> dict[str, Any]:
    """Structured fields attached to retry logs (surface in JSON log lines)."""
    return {
        "task": task,
        "retry": retries,
        "failure": type(exc).__name__,
        "status": getattr(exc, "status_code", None),
    }
