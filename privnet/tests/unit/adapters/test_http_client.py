"""Tests for the requests-based ApiSession executor."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import pytest
from requests import exceptions as req_exc

from privnet.adapters.api_errors import (
    ApiCancelledError,
    ApiClientError,
    ApiDecodeError,
    ApiError,
    ApiServerError,
    ApiTransportError,
)
from privnet.adapters.http_client import ApiSession, HttpConfig
from privnet.adapters.network_rest import NetworkRestAdapter
from privnet.domain.context import RequestContext
from privnet.domain.network import Network


class _FakeResponse:
    """Minimal response double compatible with executor parsing helpers."""

    def __init__(self, status_code: int, payload: Any = None, *, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None and self.text:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class _FakeSession:
    """requests.Session double that records every call."""

    def __init__(
        self,
        response: Optional[_FakeResponse] = None,
        *,
        exc: Optional[Exception] = None,
        on_send: Optional[Callable[[], None]] = None,
    ) -> None:
        self.response = response
        self.exc = exc
        self.on_send = on_send
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.on_send is not None:
            self.on_send()
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response


def _executor(session: _FakeSession, api_key: Optional[str] = "secret") -> ApiSession:
    cfg = HttpConfig(base_url="https://api.example.test/", request_timeout_s=7)
    return ApiSession(api_key, cfg, session=session)  # type: ignore[arg-type]


def test_post_sends_form_body_with_auth_headers() -> None:
    session = _FakeSession(_FakeResponse(200, {"NETWORKID": "n1"}))
    executor = _executor(session)
    request = executor.new_request("post", "v1/network/create", {"DCID": "1"})

    payload = executor.do(request)

    assert payload == {"NETWORKID": "n1"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.example.test/v1/network/create"
    assert call["data"] == {"DCID": ["1"]}
    assert call["params"] is None
    assert call["timeout"] == 7
    assert call["headers"]["API-Key"] == "secret"
    assert call["headers"]["Accept"] == "application/json"


def test_get_sends_form_as_query_and_omits_key_when_unset() -> None:
    session = _FakeSession(_FakeResponse(200, {}))
    executor = _executor(session, api_key=None)

    executor.do(executor.new_request("GET", "/v1/network/list", {"tag": ["a", "b"]}))

    call = session.calls[0]
    assert call["params"] == {"tag": ["a", "b"]}
    assert call["data"] is None
    assert "API-Key" not in call["headers"]


def test_decode_false_discards_body() -> None:
    session = _FakeSession(_FakeResponse(200, None, text=""))
    executor = _executor(session)

    result = executor.do(executor.new_request("POST", "/v1/network/destroy"), decode=False)

    assert result is None


def test_client_error_carries_plain_text_detail() -> None:
    body = "Unable to remove network: attached to 1 server(s)"
    session = _FakeSession(_FakeResponse(412, None, text=body))
    executor = _executor(session)

    with pytest.raises(ApiClientError) as excinfo:
        executor.do(executor.new_request("POST", "/v1/network/destroy", {"NETWORKID": "n1"}))

    err = excinfo.value
    assert err.status == 412
    assert err.hint == body
    assert err.context == "POST /v1/network/destroy"
    assert "HTTP 412" in str(err)


def test_server_error_maps_to_api_server_error() -> None:
    session = _FakeSession(_FakeResponse(503, {"error": "maintenance"}))
    executor = _executor(session)

    with pytest.raises(ApiServerError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"))

    assert "maintenance" in str(excinfo.value)


def test_unexpected_status_maps_to_base_api_error() -> None:
    session = _FakeSession(_FakeResponse(302, None, text="moved"))
    executor = _executor(session)

    with pytest.raises(ApiError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"))

    assert not isinstance(excinfo.value, (ApiClientError, ApiServerError))
    assert excinfo.value.status == 302


def test_invalid_json_is_decode_error() -> None:
    session = _FakeSession(_FakeResponse(200, None, text="<html>oops</html>"))
    executor = _executor(session)

    with pytest.raises(ApiDecodeError):
        executor.do(executor.new_request("GET", "/v1/network/list"))


@pytest.mark.parametrize(
    "exc, expected",
    [
        (req_exc.ConnectTimeout("slow"), ApiTransportError),
        (req_exc.ConnectionError("refused"), ApiTransportError),
        (req_exc.InvalidURL("bad"), ApiTransportError),
    ],
)
def test_transport_failures_are_single_attempt(exc: Exception, expected: type) -> None:
    session = _FakeSession(exc=exc)
    executor = _executor(session)

    with pytest.raises(expected):
        executor.do(executor.new_request("GET", "/v1/network/list"))

    assert len(session.calls) == 1


def test_cancelled_context_sends_nothing() -> None:
    session = _FakeSession(_FakeResponse(200, {}))
    executor = _executor(session)
    context = RequestContext()
    context.cancel("shutdown")

    with pytest.raises(ApiCancelledError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"), context=context)

    assert excinfo.value.reason == "shutdown"
    assert session.calls == []


def test_cancellation_during_flight_drops_result() -> None:
    context = RequestContext()
    session = _FakeSession(_FakeResponse(200, {"NETWORKID": "n1"}), on_send=context.cancel)
    executor = _executor(session)

    with pytest.raises(ApiCancelledError):
        executor.do(executor.new_request("POST", "/v1/network/create"), context=context)

    assert len(session.calls) == 1


def test_expired_deadline_is_reported_as_cancellation() -> None:
    session = _FakeSession(_FakeResponse(200, {}))
    executor = _executor(session)
    context = RequestContext(timeout_s=0)

    with pytest.raises(ApiCancelledError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"), context=context)

    assert excinfo.value.reason == "deadline exceeded"


def test_deadline_shortens_socket_timeout() -> None:
    session = _FakeSession(_FakeResponse(200, {}))
    executor = _executor(session)

    executor.do(executor.new_request("GET", "/v1/network/list"), context=RequestContext(timeout_s=2))

    assert 0 < session.calls[0]["timeout"] <= 2


def test_connection_failure_message_is_not_reported_as_timeout() -> None:
    session = _FakeSession(exc=req_exc.ConnectionError("refused"))
    executor = _executor(session)

    with pytest.raises(ApiTransportError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"))

    assert str(excinfo.value).startswith("Cannot reach https://api.example.test/")
    assert "Timeout" not in str(excinfo.value)


def test_read_timeout_message_mentions_timeout() -> None:
    session = _FakeSession(exc=req_exc.ReadTimeout("slow"))
    executor = _executor(session)

    with pytest.raises(ApiTransportError) as excinfo:
        executor.do(executor.new_request("GET", "/v1/network/list"))

    assert "Timeout contacting" in str(excinfo.value)


def test_adapter_over_session_flattens_keyed_list_body() -> None:
    body = {
        "5": {"NETWORKID": "5", "DCID": "1", "description": "a", "v4_subnet": "10.5.0.0",
              "v4_subnet_mask": 24, "date_created": "2017-08-25 12:23:45"},
        "9": {"NETWORKID": "9", "DCID": "2", "description": "", "v4_subnet": "",
              "v4_subnet_mask": 0, "date_created": "2017-08-26 08:00:00"},
    }
    session = _FakeSession(_FakeResponse(200, body))
    adapter = NetworkRestAdapter(_executor(session))

    networks = adapter.get_list(context=RequestContext(timeout_s=30))

    assert set(networks) == {
        Network("5", "1", "a", "10.5.0.0", 24, "2017-08-25 12:23:45"),
        Network("9", "2", date_created="2017-08-26 08:00:00"),
    }
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.example.test/v1/network/list"
    assert call["params"] is None


def test_adapter_over_session_create_and_destroy_send_form_bodies() -> None:
    created = {"NETWORKID": "net1", "DCID": "ewr", "v4_subnet": "10.1.2.0", "v4_subnet_mask": "24"}
    session = _FakeSession(_FakeResponse(200, created))
    adapter = NetworkRestAdapter(_executor(session))

    network = adapter.create("ewr", cidr_block="10.1.2.3/24")
    session.response = _FakeResponse(200, None, text="")
    adapter.destroy(network.network_id)

    assert network == Network("net1", "ewr", v4_subnet="10.1.2.0", v4_subnet_mask=24)
    assert session.calls[0]["data"] == {
        "DCID": ["ewr"],
        "v4_subnet": ["10.1.2.0"],
        "v4_subnet_mask": ["24"],
    }
    assert session.calls[1]["url"] == "https://api.example.test/v1/network/destroy"
    assert session.calls[1]["data"] == {"NETWORKID": ["net1"]}
