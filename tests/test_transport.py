import pytest
import requests

from conftest import FakeResponse
from dk_payment_gateway import (
    APIError,
    InvalidParameterError,
    NetworkError,
    ResponseParseError,
)


def test_default_headers_include_api_key_and_content_type(client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    client.post("/v1/anything", {"a": 1}, skip_auth=True)

    headers = fake_session.last_call["headers"]
    assert headers["Content-Type"] == "application/json"
    assert headers["X-gravitee-api-key"] == "test_key"
    assert "Authorization" not in headers
    assert "source_app" not in headers


def test_authenticated_headers_add_bearer_and_source_app(authed_client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    authed_client.post("/v1/anything", {"a": 1})

    headers = fake_session.last_call["headers"]
    assert headers["Authorization"] == "Bearer token-abc"
    assert headers["source_app"] == "SRC_AVS_0201"


def test_no_bearer_header_without_token(client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    client.post("/v1/anything", {"a": 1})

    headers = fake_session.last_call["headers"]
    assert "Authorization" not in headers
    assert headers["source_app"] == "SRC_AVS_0201"


def test_caller_headers_override_defaults(client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    client.post(
        "/v1/anything",
        "a=1",
        headers={"Content-Type": "application/x-www-form-urlencoded", "DK-Nonce": "n"},
        skip_auth=True,
    )

    call = fake_session.last_call
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    assert call["headers"]["DK-Nonce"] == "n"
    assert call["data"] == "a=1"


def test_request_uses_base_url_and_timeouts(client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    client.post("/v1/transaction/status", {"b": 2, "a": 1})

    call = fake_session.last_call
    assert call["method"] == "POST"
    assert call["url"] == "https://gateway.test/api/dkpg/v1/transaction/status"
    assert call["timeout"] == (10, 30)
    assert call["data"] == b'{"b":2,"a":1}'


def test_get_passes_query_params(client, fake_session):
    fake_session.queue(FakeResponse(200, {"response_code": "0000"}))

    client.get("/v1/ping", {"q": "x"})

    assert fake_session.last_call["method"] == "GET"
    assert fake_session.last_call["params"] == {"q": "x"}
    assert fake_session.last_call["data"] is None


def test_success_returns_parsed_json(client, fake_session):
    fake_session.queue(FakeResponse(201, {"response_code": "0000", "response_data": {"x": 1}}))

    assert client.post("/v1/x", {}) == {"response_code": "0000", "response_data": {"x": 1}}


def test_success_returns_plain_text(client, fake_session):
    fake_session.queue(FakeResponse(200, text="hello", content_type="text/plain"))

    assert client.post("/v1/x", {}) == "hello"


def test_success_with_broken_json_raises_parse_error(client, fake_session):
    fake_session.queue(FakeResponse(200, text="{not json", content_type="application/json"))

    with pytest.raises(ResponseParseError):
        client.post("/v1/x", {})


def test_404_maps_to_invalid_parameter_error(client, fake_session):
    fake_session.queue(FakeResponse(404, {"response_code": "4004", "response_message": "not found"}))

    with pytest.raises(InvalidParameterError) as excinfo:
        client.post("/v1/x", {})

    assert excinfo.value.response_code == "4004"
    assert str(excinfo.value) == "not found"


def test_4xx_falls_back_to_detail_then_default(client, fake_session):
    fake_session.queue(FakeResponse(422, {"response_code": "4022", "response_detail": "bad amount"}))
    fake_session.queue(FakeResponse(400, text="oops", content_type="text/plain"))

    with pytest.raises(InvalidParameterError) as first:
        client.post("/v1/x", {})
    with pytest.raises(InvalidParameterError) as second:
        client.post("/v1/x", {})

    assert first.value.message == "bad amount"
    assert first.value.response_detail == "bad amount"
    assert second.value.message == "Client error"
    assert second.value.response_code is None


def test_500_maps_to_api_error_with_description(client, fake_session):
    fake_session.queue(FakeResponse(500, {"response_description": "db down"}))

    with pytest.raises(APIError) as excinfo:
        client.post("/v1/x", {})

    assert not isinstance(excinfo.value, InvalidParameterError)
    assert excinfo.value.message == "db down"
    assert excinfo.value.response_description == "db down"


def test_5xx_prefers_description_over_message(client, fake_session):
    fake_session.queue(
        FakeResponse(
            503,
            {"response_code": "5003", "response_message": "busy", "response_description": "retry later"},
        )
    )

    with pytest.raises(APIError) as excinfo:
        client.post("/v1/x", {})

    assert excinfo.value.message == "retry later"
    assert excinfo.value.response_message == "busy"
    assert excinfo.value.response_code == "5003"


def test_unexpected_status_is_api_error(client, fake_session):
    fake_session.queue(FakeResponse(302, text="", content_type="text/html"))

    with pytest.raises(APIError, match="Unexpected response status: 302"):
        client.post("/v1/x", {})


@pytest.mark.parametrize(
    "exc",
    [
        requests.ConnectionError("refused"),
        requests.Timeout("timed out"),
        requests.exceptions.InvalidURL("bad url"),
    ],
)
def test_transport_failures_become_network_errors(client, fake_session, exc):
    fake_session.queue(exc)

    with pytest.raises(NetworkError, match="Network error") as excinfo:
        client.post("/v1/x", {})

    assert excinfo.value.__cause__ is exc
    assert len(fake_session.calls) == 1
