from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for provider API failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the provider (rejected request, failed precondition, auth)."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from the provider."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            payload=payload,
            context=context,
        )


class ApiTransportError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


class ApiCancelledError(ApiError):
    """Request context was cancelled or its deadline passed."""

    def __init__(
        self,
        message: str,
        *,
        reason: str = "cancelled",
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, code=reason, context=context)
        self.reason = reason


class ApiDecodeError(ApiError):
    """Response body was not JSON or did not have the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, payload=payload, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of an error body (JSON, else trimmed text)."""
    try:
        return resp.json()
    except Exception:
        text = (getattr(resp, "text", "") or "").strip()
        return text[:400] or None


def error_detail(payload: Any) -> Optional[str]:
    """Return the first human-readable message found in an error body.

    The v1 API answers most rejections with a plain-text body such as
    ``"Unable to remove network: attached to 1 server(s)"``; newer gateways
    return ``{"error": "..."}`` objects instead.
    """
    if isinstance(payload, str):
        return payload.strip() or None
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            found = error_detail(payload.get(key))
            if found:
                return found
    if isinstance(payload, list):
        for item in payload:
            found = error_detail(item)
            if found:
                return found
    return None


def extract_error_code(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    for key in ("code", "error_code", "status"):
        value = payload.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = error_detail(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


__all__ = [
    "ApiCancelledError",
    "ApiClientError",
    "ApiDecodeError",
    "ApiError",
    "ApiServerError",
    "ApiTransportError",
    "build_error_message",
    "error_detail",
    "extract_error_code",
    "parse_error_payload",
]
