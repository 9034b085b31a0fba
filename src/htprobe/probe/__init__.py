"""Request execution and redirect walking."""

from .models import (
    ALLOWED_METHODS,
    REDIRECT_LIMIT_STATUS,
    HttpCookie,
    RequestMethod,
    TLSState,
    WebRequest,
    WebRequestResult,
    method_needs_body,
    method_names,
)
from .http_client import ProbeHttpClient, reconcile_cookies
from .redirects import MAX_REDIRECTS, follow_chain, single_request, walk
from .inputs import check_url, normalize_method

__all__ = [
    "ALLOWED_METHODS",
    "REDIRECT_LIMIT_STATUS",
    "HttpCookie",
    "RequestMethod",
    "TLSState",
    "WebRequest",
    "WebRequestResult",
    "method_needs_body",
    "method_names",
    "ProbeHttpClient",
    "reconcile_cookies",
    "MAX_REDIRECTS",
    "follow_chain",
    "single_request",
    "walk",
    "check_url",
    "normalize_method",
]
