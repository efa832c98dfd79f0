"""Translation of upstream HTTP failures into pipeline errors."""

import httpx

from macro_estimator.errors import (
    InvalidCredentialsError,
    RateLimitedError,
    UpstreamError,
)

_CREDENTIAL_STATUSES = frozenset({401, 403})
_RATE_LIMITED = 429


def raise_for_upstream_status(response: httpx.Response, *, service: str) -> None:
    """Raise a typed error for any non-2xx response."""
    if response.is_success:
        return
    status_code = response.status_code
    message = upstream_error_message(response, service=service)
    if status_code == _RATE_LIMITED:
        raise RateLimitedError(message, status_code=status_code, service=service)
    if status_code in _CREDENTIAL_STATUSES:
        raise InvalidCredentialsError(message, status_code=status_code, service=service)
    raise UpstreamError(message, status_code=status_code, service=service)


def upstream_error_message(response: httpx.Response, *, service: str) -> str:
    """Return the server-supplied message when decodable, else a generic one."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
        error = payload.get("error")
        if isinstance(error, dict):
            nested = error.get("message")
            if isinstance(nested, str) and nested:
                return nested
    return f"{service} request failed with HTTP {response.status_code}"


def transport_error(exc: httpx.RequestError, *, service: str) -> UpstreamError:
    """Wrap a connection-level failure."""
    return UpstreamError(f"{service} is unreachable: {exc}", service=service)
