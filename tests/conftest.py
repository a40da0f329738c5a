import json
from collections import deque
from typing import Any, Optional
from urllib.parse import parse_qs

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from dk_payment_gateway import GatewayClient, GatewayConfig


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        *,
        text: Optional[str] = None,
        content_type: Optional[str] = None,
        url: str = "https://gateway.test/api/dkpg",
    ):
        self.status_code = status_code
        if text is None:
            text = "" if body is None else json.dumps(body)
            content_type = content_type or "application/json"
        self.text = text
        self.headers = {"Content-Type": content_type or "text/plain"}
        self.url = url

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for ``requests.Session``: records calls and replays queued responses."""

    def __init__(self):
        self.responses = deque()
        self.calls = []

    def queue(self, response):
        self.responses.append(response)
        return self

    def request(self, method, url, data=None, params=None, headers=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "data": data,
                "params": params,
                "headers": dict(headers or {}),
                "timeout": timeout,
            }
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.popleft()
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_call(self):
        return self.calls[-1]

    def form(self, index):
        data = self.calls[index]["data"]
        return {key: values[0] for key, values in parse_qs(data).items()}

    def json_body(self, index):
        data = self.calls[index]["data"]
        return json.loads(data.decode("utf-8") if isinstance(data, bytes) else data)


@pytest.fixture(scope="session")
def rsa_keys():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode("ascii")
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return private_pem, public_pem


@pytest.fixture
def private_pem(rsa_keys):
    return rsa_keys[0]


@pytest.fixture
def public_pem(rsa_keys):
    return rsa_keys[1]


@pytest.fixture
def config():
    return GatewayConfig(
        base_url="https://gateway.test/api/dkpg/",
        api_key="test_key",
        username="test_user",
        password="test_pass",
        client_id="test_client_id",
        client_secret="test_secret",
        source_app="SRC_AVS_0201",
    )


@pytest.fixture
def fake_session():
    return FakeSession()


def token_response(token="token-abc"):
    return FakeResponse(
        200,
        {
            "response_code": "0000",
            "response_message": "SUCCESS",
            "response_data": {"access_token": token, "token_type": "Bearer"},
        },
    )


def key_response(pem):
    return FakeResponse(200, text=pem, content_type="text/plain")


@pytest.fixture
def client(config, fake_session):
    return GatewayClient(config, session=fake_session)


@pytest.fixture
def authed_client(client, fake_session, private_pem):
    fake_session.queue(token_response()).queue(key_response(private_pem))
    client.authenticate()
    fake_session.calls.clear()
    return client
