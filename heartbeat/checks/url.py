# ============================================================================
# URL CHECK
# ============================================================================
# STATUS: Checks - HTTP endpoint prober
# PURPOSE: Probe a dependency's http/https endpoint and classify the outcome
# CREATED: 17 OCT 2026
# ============================================================================
"""
URL Check

Issues one GET against a dependency endpoint and maps the outcome:

    invalid URL / non-http scheme    -> Critical (no request made)
    scope cancelled or expired       -> Critical "request cancelled: ..."
    transport failure                -> Critical, underlying error
    5xx                              -> Critical "server error"
    4xx                              -> Critical "client error"
    3xx                              -> Warning "redirect"
    2xx slower than 3s               -> Warning "slow response"
    2xx                              -> OK "ok"
    anything else                    -> Critical "unexpected status"

Redirects are not followed, so a 3xx is reported as such.
"""

import asyncio
import logging
import time
from typing import Optional, Tuple

import httpx

from heartbeat import core
from heartbeat.core import CheckResult, DEFAULT_TIMEOUT_SECONDS, format_duration
from heartbeat.scope import CheckScope

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


def _parse_url(url: str) -> Tuple[Optional[httpx.URL], Optional[str]]:
    """Return (parsed, None) or (None, error message)."""
    if not url:
        return None, "invalid URL: empty"
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        return None, f"invalid URL {url!r}: {e}"

    if parsed.scheme not in ALLOWED_SCHEMES:
        return None, f"unsupported URL scheme {parsed.scheme!r}: only http and https are allowed"
    if not parsed.host:
        return None, f"invalid URL {url!r}: missing host"
    return parsed, None


async def _fetch(
    url: httpx.URL,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
    started: float,
) -> Tuple[int, float]:
    """GET the URL; return (status code, seconds until the response arrived)."""
    async with httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        follow_redirects=False,
    ) as client:
        async with client.stream("GET", url) as response:
            elapsed = time.perf_counter() - started
            # Drain so the connection is released cleanly
            async for _ in response.aiter_raw():
                pass
            return response.status_code, elapsed


def classify(status_code: int, elapsed: float) -> CheckResult:
    """Map an HTTP status code and response time to a result."""
    if status_code >= 500:
        return CheckResult.critical(f"server error: HTTP {status_code}")
    if 400 <= status_code <= 499:
        return CheckResult.critical(f"client error: HTTP {status_code}")
    if 300 <= status_code <= 399:
        return CheckResult.warning(f"redirect: HTTP {status_code}")
    if 200 <= status_code <= 299:
        threshold = core.SLOW_RESPONSE_THRESHOLD_SECONDS
        if elapsed > threshold:
            return CheckResult.warning(
                f"slow response: {elapsed * 1000:.0f}ms exceeds {format_duration(threshold)}"
            )
        return CheckResult.ok()
    return CheckResult.critical(f"unexpected status: HTTP {status_code}")


async def check_url(
    url: str,
    scope: Optional[CheckScope] = None,
    timeout: float = 0.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CheckResult:
    """
    Probe a URL and return its CheckResult.

    Args:
        url: Endpoint to GET (http or https only)
        scope: Caller scope; cancelling it aborts the in-flight request
        timeout: Seconds, 0 applies DEFAULT_TIMEOUT_SECONDS
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Returns:
        CheckResult with resource set to the URL. Never raises.
    """
    parsed, error = _parse_url(url)
    if error:
        logger.warning(f"Rejected dependency URL {url!r}: {error}")
        return CheckResult.critical(error, name=url, resource=url)

    scope = scope or CheckScope()
    timeout = timeout or DEFAULT_TIMEOUT_SECONDS

    started = time.perf_counter()

    def elapsed_ms() -> float:
        return (time.perf_counter() - started) * 1000

    if scope.done:
        return CheckResult.critical(
            f"request cancelled: {scope.reason}", resource=url, latency_ms=elapsed_ms()
        )

    request = asyncio.ensure_future(_fetch(parsed, timeout, transport, started))
    scope_ended = asyncio.ensure_future(scope.wait())
    try:
        await asyncio.wait(
            {request, scope_ended},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        scope_ended.cancel()
        if not request.done():
            request.cancel()
            # Wait for the client to close without re-raising the request's cancellation
            await asyncio.wait({request})

    if request.cancelled():
        if scope.done:
            message = f"request cancelled: {scope.reason}"
        else:
            message = f"request failed: timeout after {format_duration(timeout)}"
        return CheckResult.critical(message, resource=url, latency_ms=elapsed_ms())

    try:
        status_code, elapsed = request.result()
    except httpx.TimeoutException as e:
        return CheckResult.critical(
            f"request failed: timeout after {format_duration(timeout)} ({type(e).__name__})",
            resource=url,
            latency_ms=elapsed_ms(),
        )
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
        return CheckResult.critical(
            f"request failed: {str(e) or type(e).__name__}",
            resource=url,
            latency_ms=elapsed_ms(),
        )
    except Exception as e:
        logger.exception(f"URL check for {url} failed: {e}")
        return CheckResult.critical(
            f"request failed: {type(e).__name__}: {e}",
            resource=url,
            latency_ms=elapsed_ms(),
        )

    result = classify(status_code, elapsed)
    result.resource = url
    result.status_code = status_code
    result.latency_ms = elapsed * 1000
    return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ALLOWED_SCHEMES",
    "check_url",
    "classify",
]
