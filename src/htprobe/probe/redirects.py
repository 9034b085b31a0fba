"""Redirect walker: turns one request into an ordered chain of hops."""

from __future__ import annotations

import logging

import httpx

from ..errors import ResponseInvalidError
from .http_client import ProbeHttpClient
from .models import REDIRECT_LIMIT_STATUS, WebRequest, WebRequestResult

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 25


def single_request(client: ProbeHttpClient, request: WebRequest) -> list[WebRequestResult]:
    """Issue exactly one request and return a one-element chain."""
    return [client.send(request)]


def follow_chain(client: ProbeHttpClient, request: WebRequest) -> list[WebRequestResult]:
    """Follow 3xx responses until a final status or the redirect ceiling.

    The request method of a hop is carried over unchanged to the next hop,
    for every redirect status. When ``MAX_REDIRECTS`` is reached the last
    hop's status is replaced by ``REDIRECT_LIMIT_STATUS`` instead of raising,
    so the partial chain can still be shown.

    Raises:
        ResponseInvalidError: If a redirect has no usable Location header
    """
    result = client.send(request)
    hops = [result]

    count = 0
    while result.is_redirect:
        request.url = next_location(result)
        request.method = result.request.method

        count += 1
        if count >= MAX_REDIRECTS:
            logger.info("Redirect limit of %d reached at %s", MAX_REDIRECTS, result.url)
            result.status_code = REDIRECT_LIMIT_STATUS
            break

        logger.debug("Following %d redirect to %s", result.status_code, request.url)
        result = client.send(request)
        hops.append(result)

    return hops


def walk(
    client: ProbeHttpClient,
    request: WebRequest,
    follow: bool,
) -> list[WebRequestResult]:
    """Run the request in follow or no-follow mode."""
    if follow:
        return follow_chain(client, request)
    return single_request(client, request)


def next_location(result: WebRequestResult) -> str:
    """Resolve the Location header of a redirect against the hop URL."""
    location = result.response.headers.get("location")
    if not location or not location.strip():
        raise ResponseInvalidError(
            f"Redirect {result.status_code} without Location header", result.url
        )
    try:
        return str(result.request.url.join(location.strip()))
    except httpx.InvalidURL as e:
        raise ResponseInvalidError(f"Unusable Location header: {e}", result.url) from e
