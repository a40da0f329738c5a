import base64
import threading

import pytest

from conftest import FakeResponse, key_response, token_response
from dk_payment_gateway import (
    AuthenticationError,
    ConfigurationError,
    GatewayClient,
    GatewayConfig,
    InvalidParameterError,
    QrGeneration,
    SignatureError,
    create_client,
    verify_signature,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(32))


def test_client_rejects_incomplete_config(fake_session):
    with pytest.raises(ConfigurationError, match="api_key"):
        GatewayClient(GatewayConfig(base_url="https://gateway.test"), session=fake_session)

    assert fake_session.calls == []


def test_client_rejects_missing_config():
    with pytest.raises(ConfigurationError, match="Configuration is required"):
        GatewayClient(None)


def test_new_client_is_unauthenticated(client):
    assert client.access_token is None
    assert client.private_key is None
    assert client.authenticated is False


def test_sign_before_authenticate_fails(client):
    with pytest.raises(SignatureError, match="Private key not available"):
        client.sign({"a": 1})


def test_authenticate_populates_session(client, fake_session, private_pem):
    fake_session.queue(token_response("tok-1")).queue(key_response(private_pem))

    assert client.authenticate() is client
    assert client.access_token == "tok-1"
    assert client.private_key == private_pem
    assert client.authenticated is True


def test_reauthenticate_replaces_token(authed_client, fake_session, private_pem):
    fake_session.queue(token_response("tok-2")).queue(key_response(private_pem))

    authed_client.authenticate()

    assert authed_client.access_token == "tok-2"
    assert fake_session.calls[1]["headers"]["Authorization"] == "Bearer tok-2"


def test_failed_key_step_leaves_fresh_client_unauthenticated(client, fake_session):
    fake_session.queue(token_response("tok-1")).queue(
        FakeResponse(500, {"response_code": "5000", "response_message": "down"})
    )

    with pytest.raises(AuthenticationError, match="Failed to fetch private key"):
        client.authenticate()

    assert client.access_token is None
    assert client.private_key is None
    assert client.authenticated is False


def test_failed_reauthentication_keeps_previous_token_and_key(authed_client, fake_session, private_pem):
    fake_session.queue(token_response("tok-new")).queue(
        FakeResponse(200, {"response_code": "3001", "response_detail": "no key"})
    )

    with pytest.raises(AuthenticationError, match="Private key not found"):
        authed_client.authenticate()

    assert authed_client.access_token == "token-abc"
    assert authed_client.private_key == private_pem
    assert fake_session.calls[1]["headers"]["Authorization"] == "Bearer tok-new"


def test_concurrent_authentication_is_serialized(client, private_pem):
    active = []
    overlap = []
    lock = threading.Lock()

    class SlowSession:
        def request(self, method, url, **kwargs):
            with lock:
                active.append(url)
                if len(active) > 1:
                    overlap.append(list(active))
            threading.Event().wait(0.01)
            with lock:
                active.remove(url)
            if url.endswith("/v1/auth/token"):
                return token_response()
            return key_response(private_pem)

    client.transport.session = SlowSession()
    threads = [threading.Thread(target=client.authenticate) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlap == []
    assert client.authenticated


def test_sign_returns_verifiable_headers(authed_client, public_pem):
    body = {"request_id": "R", "amount": 1}

    headers = authed_client.sign(body)

    assert verify_signature(public_pem, headers, body)


def test_end_to_end_qr_generation(client, fake_session, private_pem, public_pem, tmp_path):
    image = base64.b64encode(PNG_BYTES).decode("ascii")
    fake_session.queue(token_response()).queue(key_response(private_pem)).queue(
        FakeResponse(
            200,
            {
                "response_code": "0000",
                "response_message": "SUCCESS",
                "response_data": {"image": image},
            },
        )
    )

    client.authenticate()
    body = QrGeneration(
        request_id="REQ_1700000000_abcdef123456",
        currency="BTN",
        bene_account_number="100100148337",
        amount=0,
        mcc_code="5411",
    )
    data = client.qr_payment.generate_qr(body)

    call = fake_session.last_call
    assert call["url"] == "https://gateway.test/api/dkpg/v1/generate_qr"
    assert call["headers"]["DK-Signature"].startswith("DKSignature ")
    assert call["data"] == (
        b'{"request_id":"REQ_1700000000_abcdef123456","currency":"BTN",'
        b'"bene_account_number":"100100148337","amount":0,"mcc_code":"5411"}'
    )
    assert verify_signature(public_pem, call["headers"], call["data"])

    assert client.qr_payment.decode_qr_image(data["image"]) == PNG_BYTES
    saved = client.qr_payment.save_qr_image(data["image"], tmp_path / "qr.png")
    assert saved.read_bytes() == PNG_BYTES


def test_decode_qr_image_rejects_invalid_base64(client):
    with pytest.raises(InvalidParameterError, match="not valid base64"):
        client.qr_payment.decode_qr_image("###")


def test_wrappers_are_cached(client):
    assert client.qr_payment is client.qr_payment
    assert client.pull_payment.client is client


def test_create_client_from_environment(fake_session):
    client = create_client(
        session=fake_session,
        env_file=None,
        base={
            "DK_BASE_URL": "https://gateway.test",
            "DK_API_KEY": "k",
            "DK_USERNAME": "u",
            "DK_PASSWORD": "p",
            "DK_CLIENT_ID": "c",
            "DK_CLIENT_SECRET": "s",
            "DK_SOURCE_APP": "SRC_AVS_0201",
        },
    )

    assert client.config.api_key == "k"
    assert client.session is fake_session


def test_create_client_rejects_config_plus_parameters(config):
    with pytest.raises(ValueError, match="not both"):
        create_client(config=config, api_key="other")
