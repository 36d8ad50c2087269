"""Typed decoding of Microsoft Graph responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests


@dataclass(frozen=True)
class GraphError:
    """An error reported by Graph, or synthesised from a bare HTTP failure."""

    code: str
    message: str
    status_code: Optional[int] = None
    raw: str = ""

    def __str__(self):
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class GraphResult:
    """A decoded Graph response: a JSON body, or an error."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)
    raw: str = ""
    error: Optional[GraphError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self, key, default=None):
        return self.body.get(key, default)


def decode_response(response: requests.Response) -> GraphResult:
    """
    Decode a Graph response into a ``GraphResult``.

    An ``"error"`` object in the body always makes the result an error, even
    when the HTTP status says success. A non-2xx status without a parseable
    error body becomes an ``http_<status>`` error.
    """
    raw = response.text or ""
    status_code = response.status_code

    body: Dict[str, Any] = {}
    parsed = False
    if raw.strip():
        try:
            decoded = response.json()
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            body = decoded
            parsed = True

    if parsed and "error" in body:
        error_body = body["error"]
        if isinstance(error_body, dict):
            code = error_body.get("code") or "unknownError"
            message = error_body.get("message") or error_body.get("error_description") or code
        else:
            code = "unknownError"
            message = str(error_body)
        return GraphResult(
            status_code,
            body,
            raw,
            GraphError(code=code, message=message, status_code=status_code, raw=raw),
        )

    if not 200 <= status_code < 300:
        reason = getattr(response, "reason", None) or "request failed"
        return GraphResult(
            status_code,
            body,
            raw,
            GraphError(
                code=f"http_{status_code}",
                message=f"HTTP {status_code} {reason}",
                status_code=status_code,
                raw=raw,
            ),
        )

    return GraphResult(status_code, body, raw)
