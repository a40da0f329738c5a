"""
Operation wrappers for the signed gateway endpoints.

Wrappers only validate a request, hand its body to the client for signing and
transmission, and unwrap ``response_data`` from a successful envelope.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence, Union

from .envelope import ResponseEnvelope
from .errors import InvalidParameterError
from .payloads import (
    AccountInquiry,
    CurrentDayStatus,
    FundTransfer,
    HistoricalStatus,
    PullPaymentAuthorization,
    PullPaymentDebit,
    QrGeneration,
)
from .utils import generate_stan

if TYPE_CHECKING:
    from .client import GatewayClient

__all__ = [
    "IntraTransaction",
    "PullPayment",
    "QrPayment",
    "TransactionStatus",
]

_DESCRIPTION_FIRST = ("response_description", "response_message")
_DETAIL_FIRST = ("response_detail", "response_message")
_STATUS_PREFERENCE = ("response_description", "response_detail", "response_message")


class _Operation:
    def __init__(self, client: "GatewayClient") -> None:
        self.client = client

    def _execute(
        self,
        path: str,
        request: Any,
        operation: str,
        preference: Sequence[str],
        **body_options: Any,
    ) -> Any:
        violations = request.validate()
        if violations:
            raise InvalidParameterError("; ".join(violations), violations=violations)

        response = self.client.post_signed(path, request.to_body(**body_options))
        envelope = ResponseEnvelope.from_payload(response)
        envelope.ensure_success(operation, preference)
        return envelope.response_data


class PullPayment(_Operation):
    """Two-step pull payment: authorize (sends the OTP), then debit."""

    AUTHORIZE_PATH = "/v1/account_auth/pull-payment"
    DEBIT_PATH = "/v1/debit_request/pull-payment"

    generate_stan = staticmethod(generate_stan)

    def authorize(self, request: PullPaymentAuthorization) -> Any:
        """Returns ``bfs_txn_id``, ``stan_number`` and the account numbers."""
        return self._execute(self.AUTHORIZE_PATH, request, "Authorization", _DESCRIPTION_FIRST)

    def debit(self, request: PullPaymentDebit) -> Any:
        return self._execute(self.DEBIT_PATH, request, "Debit", _DESCRIPTION_FIRST)


class IntraTransaction(_Operation):
    """DK to DK transfers: beneficiary inquiry followed by the transfer."""

    INQUIRY_PATH = "/v1/beneficiary/account_inquiry"
    TRANSFER_PATH = "/v1/initiate/transaction"

    def account_inquiry(self, request: AccountInquiry) -> Any:
        """Returns ``inquiry_id`` and the beneficiary ``account_name``."""
        return self._execute(self.INQUIRY_PATH, request, "Account Inquiry", _DESCRIPTION_FIRST)

    def fund_transfer(self, request: FundTransfer) -> Any:
        return self._execute(
            self.TRANSFER_PATH,
            request,
            "Fund Transfer",
            _DESCRIPTION_FIRST,
            default_source_app=self.client.config.source_app,
        )


class QrPayment(_Operation):
    GENERATE_PATH = "/v1/generate_qr"

    def generate_qr(self, request: QrGeneration) -> Any:
        """Returns the response data holding the base64 encoded QR image."""
        return self._execute(self.GENERATE_PATH, request, "QR Generation", _DETAIL_FIRST)

    @staticmethod
    def decode_qr_image(base64_image: str) -> bytes:
        try:
            return base64.b64decode(base64_image, validate=True)
        except (binascii.Error, ValueError, TypeError) as exc:
            raise InvalidParameterError(f"QR image is not valid base64: {exc}") from exc

    @classmethod
    def save_qr_image(cls, base64_image: str, file_path: Union[str, Path]) -> Path:
        path = Path(file_path)
        path.write_bytes(cls.decode_qr_image(base64_image))
        return path


class TransactionStatus(_Operation):
    CURRENT_DAY_PATH = "/v1/transaction/status"
    PREVIOUS_DAYS_PATH = "/v1/transactions/status"

    def check_current_day(self, request: CurrentDayStatus) -> Any:
        return self._execute(
            self.CURRENT_DAY_PATH,
            request,
            "Transaction Status Check",
            _STATUS_PREFERENCE,
        )

    def check_previous_days(self, request: HistoricalStatus) -> Any:
        return self._execute(
            self.PREVIOUS_DAYS_PATH,
            request,
            "Transaction Status Check",
            _STATUS_PREFERENCE,
        )

    check_status = check_current_day
    check_historical_status = check_previous_days

