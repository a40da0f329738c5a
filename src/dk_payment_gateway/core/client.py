"""
Client object tying configuration, session state and transport together.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Mapping, Optional

import requests

from .auth import Authenticator
from .canonical import canonical_json
from .config import GatewayConfig
from .errors import ConfigurationError, SignatureError
from .operations import IntraTransaction, PullPayment, QrPayment, TransactionStatus
from .session import GatewaySession
from .signing import sign_canonical
from .transport import Body, Transport

__all__ = ["GatewayClient"]


class GatewayClient:
    """
    Entry point for talking to the DK payment gateway.

    Construct it with a complete :class:`GatewayConfig`, call
    :meth:`authenticate` once, then use the operation wrappers
    (:attr:`pull_payment`, :attr:`intra_transaction`, :attr:`qr_payment`,
    :attr:`transaction_status`). The client is meant for sequential use;
    concurrent callers may share it for signed requests, and
    :meth:`authenticate` is guarded by a lock.
    """

    def __init__(
        self,
        config: GatewayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        if config is None:
            raise ConfigurationError("Configuration is required")
        self.config = config.validate()
        self.state = GatewaySession()
        self.transport = Transport(self.config, self.state, session=session)
        self._auth_lock = threading.Lock()
        self._pull_payment: Optional[PullPayment] = None
        self._intra_transaction: Optional[IntraTransaction] = None
        self._qr_payment: Optional[QrPayment] = None
        self._transaction_status: Optional[TransactionStatus] = None

    @property
    def session(self) -> requests.Session:
        return self.transport.session

    @property
    def access_token(self) -> Optional[str]:
        return self.state.access_token

    @property
    def private_key(self) -> Optional[str]:
        return self.state.private_key

    @property
    def authenticated(self) -> bool:
        return self.state.authenticated

    def authenticate(self) -> "GatewayClient":
        """Obtain a bearer token and the session signing key."""
        with self._auth_lock:
            Authenticator(self.config, self.transport, self.state).authenticate()
        logging.info("Authenticated against %s", self.config.base_url)
        return self

    def sign(self, body: Mapping[str, Any]) -> Dict[str, str]:
        return self._sign_raw(canonical_json(body))

    def _sign_raw(self, raw: bytes) -> Dict[str, str]:
        private_key = self.state.private_key
        if not private_key:
            raise SignatureError("Private key not available. Call authenticate() first")
        return sign_canonical(private_key, raw)

    def post(
        self,
        path: str,
        body: Body = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Any:
        return self.transport.post(path, body, headers=headers, skip_auth=skip_auth)

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        skip_auth: bool = False,
    ) -> Any:
        return self.transport.get(path, params, headers=headers, skip_auth=skip_auth)

    def post_signed(self, path: str, body: Mapping[str, Any]) -> Any:
        """
        Sign ``body`` and POST it.

        The body is canonicalized once so the transmitted bytes are exactly the
        bytes covered by ``DK-Signature``.
        """
        raw = canonical_json(body)
        headers = self._sign_raw(raw)
        return self.transport.post(path, raw, headers=headers)

    @property
    def pull_payment(self) -> PullPayment:
        if self._pull_payment is None:
            self._pull_payment = PullPayment(self)
        return self._pull_payment

    @property
    def intra_transaction(self) -> IntraTransaction:
        if self._intra_transaction is None:
            self._intra_transaction = IntraTransaction(self)
        return self._intra_transaction

    @property
    def qr_payment(self) -> QrPayment:
        if self._qr_payment is None:
            self._qr_payment = QrPayment(self)
        return self._qr_payment

    @property
    def transaction_status(self) -> TransactionStatus:
        if self._transaction_status is None:
            self._transaction_status = TransactionStatus(self)
        return self._transaction_status
