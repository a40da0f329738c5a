"""
Request types for the signed gateway operations.

Each request is a frozen dataclass. Required and optional fields are explicit.
``validate()`` is a pure check that returns a list of violations (empty when
the request is acceptable), and ``to_body()`` builds the wire mapping in the
exact key order the gateway signs over. Several wire names are misspelled on
the gateway side; they are reproduced as the gateway expects them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from .utils import is_numeric, valid_date_format

__all__ = [
    "AccountInquiry",
    "CurrentDayStatus",
    "FundTransfer",
    "HistoricalStatus",
    "PullPaymentAuthorization",
    "PullPaymentDebit",
    "QrGeneration",
]

Amount = Union[int, float, Decimal, str]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _missing(request: Any, names: Iterable[str], *, allow_empty: bool = False) -> List[str]:
    if allow_empty:
        absent = [name for name in names if getattr(request, name) is None]
    else:
        absent = [name for name in names if _is_blank(getattr(request, name))]
    if not absent:
        return []
    return [f"Missing required parameters: {', '.join(absent)}"]


@dataclass(frozen=True)
class PullPaymentAuthorization:
    """Account inquiry plus OTP request for a pull payment."""

    transaction_datetime: str
    stan_number: str
    transaction_amount: Amount
    payment_desc: str
    account_number: str
    account_name: str
    phone_number: str
    remitter_account_number: str
    remitter_account_name: str
    remitter_bank_id: str
    transaction_fee: Amount = 0
    email_id: Optional[str] = None

    REQUIRED = (
        "transaction_datetime",
        "stan_number",
        "transaction_amount",
        "payment_desc",
        "account_number",
        "account_name",
        "phone_number",
        "remitter_account_number",
        "remitter_account_name",
        "remitter_bank_id",
    )

    def validate(self) -> List[str]:
        return _missing(self, self.REQUIRED)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "transaction_datetime": self.transaction_datetime,
            "stan_number": self.stan_number,
            "transaction_amount": self.transaction_amount,
            "transaction_fee": 0 if self.transaction_fee is None else self.transaction_fee,
            "payment_desc": self.payment_desc,
            "account_number": self.account_number,
            "account_name": self.account_name,
            "phone_number": self.phone_number,
            "remitter_account_number": self.remitter_account_number,
            "remitter_account_name": self.remitter_account_name,
            "remitter_bank_id": self.remitter_bank_id,
        }
        if self.email_id:
            body["email_id"] = self.email_id
        return body


@dataclass(frozen=True)
class PullPaymentDebit:
    """OTP confirmation that completes an authorized pull payment."""

    request_id: str
    bfs_txn_id: str
    bfs_remitter_otp: str
    bfs_order_no: Optional[str] = None

    REQUIRED = ("request_id", "bfs_txn_id", "bfs_remitter_otp")

    def validate(self) -> List[str]:
        return _missing(self, self.REQUIRED)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "request_id": self.request_id,
            "bfs_bfsTxnId": self.bfs_txn_id,
            "bfs_remitter_Otp": self.bfs_remitter_otp,
        }
        if self.bfs_order_no:
            body["bfs_orderNo"] = self.bfs_order_no
        return body


@dataclass(frozen=True)
class AccountInquiry:
    """Intra-bank beneficiary lookup performed before a fund transfer."""

    request_id: str
    amount: Amount
    currency: str
    bene_bank_code: str
    bene_account_number: str
    source_account_number: str
    source_account_name: Optional[str] = None

    REQUIRED = (
        "request_id",
        "amount",
        "currency",
        "bene_bank_code",
        "bene_account_number",
        "source_account_number",
    )

    def validate(self) -> List[str]:
        return _missing(self, self.REQUIRED)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "request_id": self.request_id,
            "amount": str(self.amount),
            "currency": self.currency,
            "bene_bank_code": self.bene_bank_code,
            "bene_account_number": self.bene_account_number,
            "soure_account_number": self.source_account_number,
        }
        if self.source_account_name:
            body["source_account_name"] = self.source_account_name
        return body


@dataclass(frozen=True)
class FundTransfer:
    """Intra-bank transfer referencing a prior :class:`AccountInquiry`."""

    request_id: str
    inquiry_id: str
    transaction_amount: Amount
    currency: str
    transaction_datetime: str
    bene_bank_code: str
    bene_account_number: str
    bene_cust_name: str
    source_account_number: str
    narration: str
    source_app: Optional[str] = None
    payment_type: str = "INTRA"
    source_account_name: Optional[str] = None

    REQUIRED = (
        "request_id",
        "inquiry_id",
        "transaction_amount",
        "currency",
        "transaction_datetime",
        "bene_bank_code",
        "bene_account_number",
        "bene_cust_name",
        "source_account_number",
        "narration",
    )

    def validate(self) -> List[str]:
        return _missing(self, self.REQUIRED)

    def to_body(self, default_source_app: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "request_id": self.request_id,
            "inquiry_id": self.inquiry_id,
            "transaction_datetime": self.transaction_datetime,
            "source_app": self.source_app or default_source_app,
            "transaction_amount": self.transaction_amount,
            "currency": self.currency,
            "payment_type": self.payment_type or "INTRA",
            "source_account_number": self.source_account_number,
            "bene_cust_name": self.bene_cust_name,
            "bene_account_number": self.bene_account_number,
            "bene_bank_code": self.bene_bank_code,
            "narration": self.narration,
        }
        if self.source_account_name:
            body["source_account_name"] = self.source_account_name
        return body


@dataclass(frozen=True)
class QrGeneration:
    """
    QR code request.

    An ``amount`` of 0 produces a static QR (the payer types the amount); any
    positive amount produces a dynamic QR fixed to that amount.
    """

    request_id: str
    currency: str
    bene_account_number: str
    amount: Amount
    mcc_code: str
    remarks: Optional[str] = None

    REQUIRED = ("request_id", "currency", "bene_account_number", "amount", "mcc_code")

    def validate(self) -> List[str]:
        violations = _missing(self, self.REQUIRED, allow_empty=True)
        if violations:
            return violations
        if not is_numeric(self.amount):
            violations.append("Amount must be a valid number")
        return violations

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "request_id": self.request_id,
            "currency": self.currency,
            "bene_account_number": self.bene_account_number,
            "amount": self.amount,
            "mcc_code": self.mcc_code,
        }
        if self.remarks:
            body["remarks"] = self.remarks
        return body


@dataclass(frozen=True)
class CurrentDayStatus:
    request_id: str
    transaction_id: str
    bene_account_number: str

    REQUIRED = ("request_id", "transaction_id", "bene_account_number")

    def validate(self) -> List[str]:
        return _missing(self, self.REQUIRED)

    def to_body(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "transaction_id": self.transaction_id,
            "bene_account_number": self.bene_account_number,
        }


@dataclass(frozen=True)
class HistoricalStatus:
    """Status lookup for a transaction initiated on an earlier business day."""

    request_id: str
    transaction_id: str
    transaction_date: str
    bene_account_number: str

    REQUIRED = ("request_id", "transaction_id", "transaction_date", "bene_account_number")

    def validate(self) -> List[str]:
        violations = _missing(self, self.REQUIRED)
        if violations:
            return violations
        if not valid_date_format(self.transaction_date):
            violations.append("transaction_date must be in YYYY-MM-DD format")
        return violations

    def to_body(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "transaction_id": self.transaction_id,
            "trasnaction_date": self.transaction_date,
            "bene_account_number": self.bene_account_number,
        }
