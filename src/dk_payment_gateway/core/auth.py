"""
Two-step authentication against the DK payment gateway.

The gateway first exchanges the configured credentials for a bearer token
(OAuth password grant) and then, using that token, hands out the RSA private
key the client must use to sign every subsequent request.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from .config import GatewayConfig
from .errors import AuthenticationError, GatewayError
from .session import GatewaySession
from .transport import API_KEY_HEADER, Transport

__all__ = [
    "KEY_NOT_FOUND_CODE",
    "PRIVATE_KEY_PATH",
    "TOKEN_PATH",
    "Authenticator",
    "generate_auth_request_id",
    "looks_like_private_key",
]

TOKEN_PATH = "/v1/auth/token"
PRIVATE_KEY_PATH = "/v1/sign/key"
KEY_NOT_FOUND_CODE = "3001"


def generate_auth_request_id() -> str:
    return f"{int(time.time())}-{secrets.token_hex(8)}"


def looks_like_private_key(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    return text.startswith("-----BEGIN") and "PRIVATE KEY-----" in text


def _wrap(prefix: str, exc: GatewayError) -> AuthenticationError:
    return AuthenticationError(f"{prefix}: {exc.message}", **exc.envelope_fields())


class Authenticator:
    """
    Populates a :class:`GatewaySession` with a token and a signing key.

    The session is the only state this class touches. :meth:`request_token`
    and :meth:`request_private_key` leave it alone; callers that share a
    client across threads must serialize :meth:`authenticate` themselves
    (:class:`GatewayClient` does this with a lock).
    """

    def __init__(self, config: GatewayConfig, transport: Transport, state: GatewaySession) -> None:
        self.config = config
        self.transport = transport
        self.state = state

    def token_request_body(self) -> str:
        return urlencode(
            {
                "username": self.config.username,
                "password": self.config.password,
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "grant_type": "password",
                "scopes": "keys:read",
                "source_app": self.config.source_app,
                "request_id": generate_auth_request_id(),
            }
        )

    def token_request_headers(self) -> Mapping[str, str]:
        return {
            "Content-Type": "application/x-www-form-urlencoded",
            API_KEY_HEADER: self.config.api_key or "",
        }

    def request_token(self) -> str:
        """Exchange the credentials for a bearer token without storing it."""
        try:
            response = self.transport.post(
                TOKEN_PATH,
                self.token_request_body(),
                headers=self.token_request_headers(),
                skip_auth=True,
            )
        except AuthenticationError:
            raise
        except GatewayError as exc:
            raise _wrap("Failed to fetch token", exc) from exc

        if not isinstance(response, Mapping) or response.get("response_code") != "0000":
            body = response if isinstance(response, Mapping) else {}
            detail = body.get("response_detail") or body.get("response_message") or "Unknown error"
            raise AuthenticationError.from_envelope(f"Token request failed: {detail}", body)

        data = response.get("response_data")
        token = data.get("access_token") if isinstance(data, Mapping) else None
        if not token:
            raise AuthenticationError.from_envelope("No access token in response", response)

        logging.info("Obtained access token for %s", self.config.source_app)
        return token

    def fetch_token(self) -> str:
        token = self.request_token()
        self.state.access_token = token
        return token

    def request_private_key(self, token: str) -> str:
        """Fetch the signing key with ``token`` as the bearer, without storing it."""
        try:
            response = self.transport.post(
                PRIVATE_KEY_PATH,
                {
                    "request_id": generate_auth_request_id(),
                    "source_app": self.config.source_app,
                },
                headers={"Authorization": f"Bearer {token}"},
            )
        except AuthenticationError:
            raise
        except GatewayError as exc:
            if exc.response_code == KEY_NOT_FOUND_CODE:
                raise AuthenticationError(
                    f"Private key not found: {exc.response_detail or exc.message}",
                    **exc.envelope_fields(),
                ) from exc
            raise _wrap("Failed to fetch private key", exc) from exc

        if looks_like_private_key(response):
            logging.info("Obtained signing key for %s", self.config.source_app)
            return response

        if isinstance(response, Mapping) and response.get("response_code") == KEY_NOT_FOUND_CODE:
            raise AuthenticationError.from_envelope(
                f"Private key not found: {response.get('response_detail')}", response
            )
        body = response if isinstance(response, Mapping) else {}
        raise AuthenticationError.from_envelope("Invalid private key response", body)

    def fetch_private_key(self, token: Optional[str] = None) -> str:
        token = token or self.state.access_token
        if not token:
            raise AuthenticationError("Access token required to fetch private key")
        private_key = self.request_private_key(token)
        self.state.private_key = private_key
        return private_key

    def authenticate(self) -> GatewaySession:
        """
        Fetch the token, then the key. The order is fixed.

        The session is only written once both steps succeed, so a failure
        leaves the previous token and key in place as a pair.
        """
        token = self.request_token()
        private_key = self.request_private_key(token)
        self.state.update(token, private_key)
        return self.state
