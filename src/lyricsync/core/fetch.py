"""
HTTP fetching for lyrics and caption endpoints.

This module intentionally contains only network logic:
- requests
- retries on transient failures
- backoff

No parsing. No provider-specific semantics.
"""

from typing import Any, Dict, Optional

import requests  # type: ignore[import-untyped]

from ..config import REQUEST_TIMEOUT, USER_AGENT
from ..exceptions import FetchError
from ..utils.retry import DEFAULT_MAX_RETRIES, Backoff, retry_call

_RETRYABLE = (requests.RequestException, ValueError)


def _is_transient(exc: Exception) -> bool:
    """Client errors other than 429 will not fix themselves on retry."""
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        status = exc.response.status_code
        return status == 429 or status >= 500
    return True


def fetch_json(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[dict] = None,
    timeout: float = REQUEST_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_sleep: float = 0.5,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    Fetch JSON from a URL.

    Raises FetchError once every retry has failed, or straight away on a
    client error.
    """
    sess = session or requests
    headers = headers or {"User-Agent": USER_AGENT}

    def _get() -> Any:
        resp = sess.get(url, params=params, headers=headers, timeout=timeout)
        resp.raise_for_status()
        return resp.json()

    try:
        return retry_call(
            _get,
            Backoff(max_retries=max_retries, base_delay=retry_sleep),
            exceptions=_RETRYABLE,
            should_retry=_is_transient,
            name=url,
        )
    except _RETRYABLE as e:
        raise FetchError(f"Request to {url} failed: {e}") from e
