"""Response error extraction for load test observability.

Parses admin API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Domain errors (400/404/409/422): {"error": "msg"} or {"error": {"field": ["msg", ...]}}
- Upstream failures (502): {"error": "msg", "failures": [{"backend": "...", "reason": "..."}]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    detail = body.get("detail")
    if isinstance(detail, list):
        parts = []
        for err in detail:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            message = " | ".join(
                f"{field}: {'; '.join(messages) if isinstance(messages, list) else messages}"
                for field, messages in error.items()
            )
        else:
            message = str(error)
        failures = body.get("failures") or []
        if failures:
            message += " [" + "; ".join(f"{f.get('backend')}: {f.get('reason')}" for f in failures) + "]"
        return message

    return str(body)[:300]
