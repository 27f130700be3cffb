"""CORS handling for browser clients of the entries API.

Headers are set on every response and OPTIONS preflights are answered
directly with 204, before routing.
"""

import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from utils.config import allowed_origin

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
ALLOWED_HEADERS = "Content-Type, X-Passphrase"
MAX_AGE_SECONDS = "86400"


def cors_headers(request_origin: str | None, configured_origin: str) -> dict[str, str]:
    """Build CORS headers.

    A wildcard configuration answers "*". A specific origin is echoed back
    when the request comes from it and is sent as configured otherwise.
    """
    if configured_origin == "*":
        origin = "*"
    elif request_origin and request_origin == configured_origin:
        origin = request_origin
    else:
        origin = configured_origin
    return {
        "Access-Control-Allow-Origin": origin,
        "Vary": "Origin",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Max-Age": MAX_AGE_SECONDS,
    }


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        headers = cors_headers(request.headers.get("origin"), allowed_origin())
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
