"""Response helpers: every response carries the same transport-security headers."""

from typing import Any

from fastapi.responses import JSONResponse, Response

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=15552001",
    "Vary": "Accept-Encoding",
    "X-Content-Type-Options": "nosniff",
}


def json_response(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=content, status_code=status_code, headers=dict(SECURITY_HEADERS)
    )


def svg_response(svg: str, status_code: int = 200) -> Response:
    return Response(
        content=svg,
        status_code=status_code,
        media_type="image/svg+xml",
        headers=dict(SECURITY_HEADERS),
    )


def error_response(error: Exception) -> JSONResponse:
    """HTTP 500 with ``{"error": "<message>"}``."""
    return json_response({"error": str(error)}, status_code=500)
