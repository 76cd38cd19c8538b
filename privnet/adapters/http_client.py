"""Shared HTTP transport for provider resource adapters.

This module provides a thin wrapper around ``requests.Session`` implementing
the ``RequestExecutor`` port: it prepares form-encoded requests under the
provider base URL, attaches the API key header, honours the caller's
``RequestContext`` and maps every failure onto the ``ApiError`` taxonomy.

Dependencies:
    - ``requests`` for network I/O.
    - ``privnet.adapters.api_errors`` for typed transport/status/decode failures.

Call context:
    - Constructed by ``privnet.app.factory.build_network_port``.
    - Used only by adapters (``NetworkRestAdapter``); callers interact through
      ``NetworkPort``.
    - Performs exactly one attempt per call; there is no retry loop here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from requests import exceptions as req_exc

from privnet.adapters.api_errors import (
    ApiCancelledError,
    ApiClientError,
    ApiDecodeError,
    ApiError,
    ApiServerError,
    ApiTransportError,
    build_error_message,
    error_detail,
    extract_error_code,
    parse_error_payload,
)
from privnet.domain.context import RequestContext
from privnet.domain.ports import ApiRequest, FormInput, FormValues, RequestExecutor

DEFAULT_BASE_URL = "https://api.vultr.com"
DEFAULT_USER_AGENT = "privnet/0.1.0"

_log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Transport settings for provider calls.

    Attributes:
        base_url: Scheme and host the versioned paths are appended to.
        request_timeout_s: Upper bound in seconds for one request; a context
            deadline may shorten it further.
        user_agent: ``User-Agent`` header value.
    """
    base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float = 10
    user_agent: str = DEFAULT_USER_AGENT


def normalize_form(form: Optional[FormInput]) -> FormValues:
    """Convert a loose mapping into ``{key: [value, ...]}`` form values."""
    values: FormValues = {}
    for key, raw in (form or {}).items():
        if isinstance(raw, str):
            values[str(key)] = [raw]
        else:
            values[str(key)] = [str(item) for item in raw]
    return values


class ApiSession(RequestExecutor):
    """Authenticated single-attempt executor over ``requests.Session``."""

    def __init__(
        self,
        api_key: Optional[str],
        cfg: Optional[HttpConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create an executor.

        Args:
            api_key: Value placed in the ``API-Key`` header, or ``None``.
            cfg: Transport settings; defaults to ``HttpConfig()``.
            session: Optional pre-built session (shared pools, test doubles).

        Side Effects:
            Creates a persistent ``requests.Session`` when none is supplied.
        """
        self.session = session if session is not None else requests.Session()
        self.api_key = api_key
        self.cfg = cfg or HttpConfig()

    def new_request(
        self, method: str, path: str, form: Optional[FormInput] = None
    ) -> ApiRequest:
        if not path.startswith("/"):
            path = f"/{path}"
        return ApiRequest(method=method.upper(), path=path, form=normalize_form(form))

    def do(
        self,
        request: ApiRequest,
        *,
        context: Optional[RequestContext] = None,
        decode: bool = True,
    ) -> Any:
        """Send ``request`` once and return the decoded JSON body.

        Args:
            request: Prepared request from ``new_request``.
            context: Optional cancellation/deadline token.
            decode: When false the body is discarded and ``None`` returned.

        Raises:
            ApiCancelledError: Context fired before sending or while in flight.
            ApiTransportError: Timeout or connectivity failure.
            ApiClientError / ApiServerError / ApiError: Non-2xx status.
            ApiDecodeError: Body is not valid JSON.
        """
        ctx = f"{request.method} {request.path}"
        self._check_context(context, ctx)

        _log.debug("%s form_keys=%s", ctx, sorted(request.form))
        try:
            resp = self._send(request, timeout=self._timeout(context))
        except req_exc.Timeout as exc:
            self._check_context(context, ctx)
            raise ApiTransportError(
                f"Timeout contacting {self.cfg.base_url}", context=ctx
            ) from exc
        except req_exc.ConnectionError as exc:
            self._check_context(context, ctx)
            raise ApiTransportError(
                f"Cannot reach {self.cfg.base_url}: {exc}", context=ctx
            ) from exc
        except req_exc.RequestException as exc:
            raise ApiTransportError(str(exc), context=ctx) from exc

        # A result that arrives after cancellation is dropped, never returned.
        self._check_context(context, ctx)
        _log.debug("%s -> HTTP %s", ctx, resp.status_code)
        self._ensure_ok(resp, ctx)
        if not decode:
            return None
        return self._json_any(resp, ctx)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _send(self, request: ApiRequest, *, timeout: float) -> requests.Response:
        url = self._make_url(request.path)
        params: Optional[Dict[str, List[str]]] = None
        data: Optional[Dict[str, List[str]]] = None
        if request.method == "GET":
            params = request.form or None
        else:
            data = request.form or None
        return self.session.request(
            request.method,
            url,
            params=params,
            data=data,
            headers=self._headers(),
            timeout=timeout,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.cfg.user_agent,
        }
        if self.api_key:
            headers["API-Key"] = self.api_key
        return headers

    def _make_url(self, path: str) -> str:
        base = self.cfg.base_url
        if base.endswith("/"):
            base = base[:-1]
        return f"{base}{path}"

    def _timeout(self, context: Optional[RequestContext]) -> float:
        timeout = float(self.cfg.request_timeout_s)
        if context is not None:
            remaining = context.remaining_s()
            if remaining is not None:
                timeout = min(timeout, remaining)
        return timeout

    @staticmethod
    def _check_context(context: Optional[RequestContext], ctx: str) -> None:
        if context is not None and context.done:
            reason = context.reason
            raise ApiCancelledError(f"{ctx}: {reason}", reason=reason, context=ctx)

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = parse_error_payload(resp)
        message = build_error_message(ctx, status, payload)
        if 400 <= status < 500:
            raise ApiClientError(
                message,
                status=status,
                code=extract_error_code(payload),
                hint=error_detail(payload),
                payload=payload,
                context=ctx,
            )
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_any(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            snippet = (getattr(resp, "text", "") or "")[:400]
            raise ApiDecodeError(
                f"{ctx}: invalid JSON response: {snippet}", payload=snippet, context=ctx
            ) from exc


__all__ = ["ApiSession", "DEFAULT_BASE_URL", "HttpConfig", "normalize_form"]
