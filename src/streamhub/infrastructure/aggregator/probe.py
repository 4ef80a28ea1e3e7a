"""Best-effort availability probe for candidate URLs.

Embed players rarely answer HEAD cleanly, so any HTTP response counts
as reachable; only transport errors and timeouts count as unavailable.
"""

from __future__ import annotations

import httpx
import structlog

log = structlog.get_logger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0


async def probe_source(
    http_client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> bool:
    """Return True if *url* answered a HEAD request within *timeout* seconds."""
    try:
        resp = await http_client.head(url, timeout=timeout, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log.debug("source_probe_failed", url=url, error=type(exc).__name__)
        return False
    log.debug("source_probe_ok", url=url, status=resp.status_code)
    return True
