"""HTTP fetcher that follows at most one redirect."""

from __future__ import annotations

import logging

import httpx

from linkchecker.models import FetchResponse

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (compatible; DocLinkChecker/0.1; +https://github.com/doc-link-checker)"
    )
}


def _fetch(client: httpx.Client, url: str) -> FetchResponse:
    response = client.get(url)
    if response.is_redirect:
        target = response.url.join(response.headers["Location"])
        logger.debug("Redirect %d: %s -> %s", response.status_code, url, target)
        response = client.get(target)

    return FetchResponse(
        url=str(response.url),
        status_code=response.status_code,
        content_type=response.headers.get("Content-Type", ""),
        body=response.text,
    )


def fetch_url(url: str, *, timeout: float = 30.0, client: httpx.Client | None = None) -> FetchResponse:
    """Fetch *url* and return a :class:`FetchResponse`.

    A redirect is followed once; whatever comes back after that, including a
    second redirect or a 4xx/5xx status, is returned as-is.  No retries and
    no rate limiting.

    Raises:
        httpx.HTTPError: On transport-level failures (connection refused,
            timeouts, malformed responses, unsupported URLs).
    """
    if client is not None:
        return _fetch(client, url)

    with httpx.Client(
        headers=_DEFAULT_HEADERS,
        timeout=timeout,
        follow_redirects=False,
    ) as own_client:
        return _fetch(own_client, url)
