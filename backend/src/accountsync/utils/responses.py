"""Shared request/response utilities for callable Lambda handlers.

Callable functions receive an API Gateway proxy event whose JSON body is
``{"data": {...}}`` and answer with ``{"result": ...}`` on success or an
error body produced by :meth:`AppError.to_dict` on failure.
"""

from __future__ import annotations

import base64
import json
import os
from dataclasses import asdict
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import BaseModel

from accountsync.exceptions import AppError
from accountsync.exceptions import ValidationError


def parse_callable_data(event: Mapping[str, Any]) -> Any:
    """Return the ``data`` member of a callable request body.

    A body without a ``data`` member is treated as the data itself, and
    an empty body yields an empty mapping.

    Raises:
        ValidationError: If the body is not valid JSON.
    """
    raw = event.get("body") or ""
    if event.get("isBase64Encoded") and raw:
        raw = base64.b64decode(raw).decode("utf-8")
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Request body must be valid JSON", field="body") from exc
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    SECURITY: These headers protect against common web vulnerabilities:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking
    - Cache-Control: Prevents caching of account data
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


# Default CORS origins for local development
_DEFAULT_CORS_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
]


def get_cors_headers(
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, str]:
    """Get CORS headers for the response.

    Args:
        event: The Lambda event containing the request origin header.

    Returns:
        Dictionary of CORS headers to include in the response.
    """
    allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if allowed_origins_env:
        allowed_origins = [
            origin.strip()
            for origin in allowed_origins_env.split(",")
            if origin.strip()
        ]
    else:
        allowed_origins = _DEFAULT_CORS_ORIGINS

    request_origin = None
    if event:
        headers = event.get("headers") or {}
        request_origin = headers.get("origin") or headers.get("Origin")

    if request_origin and request_origin in allowed_origins:
        allow_origin = request_origin
    elif allowed_origins:
        allow_origin = allowed_origins[0]
    else:
        allow_origin = "*"

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
    }


def json_response(
    status_code: int,
    body: Any,
    headers: Optional[dict[str, str]] = None,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway response.

    Args:
        status_code: HTTP status code.
        body: Response body (dict, Pydantic model, or dataclass).
        headers: Optional additional headers to include.
        event: Optional Lambda event for CORS origin detection.

    Returns:
        API Gateway response dictionary.
    """
    response_headers = {"Content-Type": "application/json"}
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(_serialize_body(body), default=str),
    }


def text_response(
    status_code: int,
    text: str,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create a plain-text API Gateway response."""
    response_headers = {"Content-Type": "text/plain; charset=utf-8"}
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))
    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": text,
    }


def callable_result(
    result: Any,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Wrap a successful callable result."""
    return json_response(200, {"result": _serialize_body(result)}, event=event)


def callable_error(
    error: AppError,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create the response for a failed callable invocation."""
    return json_response(error.status_code, error.to_dict(), event=event)


def _serialize_body(body: Any) -> Any:
    """Serialize response body to JSON-compatible format."""
    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True, exclude_none=True)

    if hasattr(body, "__dataclass_fields__"):
        return asdict(body)

    return body
