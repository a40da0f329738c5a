"""
Small helpers shared by the operation wrappers and by integrators.
"""

from __future__ import annotations

import math
import re
import secrets
import time
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from .signing import generate_timestamp

__all__ = [
    "BANK_CODES",
    "MCC_CODES",
    "bank_name",
    "format_amount",
    "generate_request_id",
    "generate_stan",
    "generate_timestamp",
    "is_numeric",
    "mask_sensitive",
    "mcc_description",
    "parse_date",
    "valid_account_number",
    "valid_amount",
    "valid_bank_code",
    "valid_date_format",
    "valid_email",
    "valid_mcc_format",
    "valid_phone_number",
]

BANK_CODES = {
    "1010": "Bank of Bhutan",
    "1040": "Bhutan National Bank",
    "1060": "Digital Kidu",
    "1070": "Druk PNB Bank",
    "1080": "T Bank",
}

MCC_CODES = {
    "5411": "Grocery Stores, Supermarkets",
    "5812": "Eating Places, Restaurants",
    "5999": "Miscellaneous and Specialty Retail Stores",
    "5814": "Fast Food Restaurants",
    "5912": "Drug Stores and Pharmacies",
    "5311": "Department Stores",
    "5541": "Service Stations",
    "5732": "Electronics Stores",
    "5942": "Book Stores",
    "5945": "Hobby, Toy, and Game Shops",
}

_ACCOUNT_NUMBER = re.compile(r"\d{8,15}")
_PHONE_NUMBER = re.compile(r"\d{8}")
_EMAIL = re.compile(r"[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+", re.IGNORECASE)
_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_MCC = re.compile(r"\d{4}")
_NUMERIC = re.compile(r"\d+(\.\d+)?")


def generate_request_id(prefix: str = "REQ") -> str:
    """``<prefix>_<unix seconds>_<12 hex chars>``, unique per call."""
    return f"{prefix}_{int(time.time())}_{secrets.token_hex(6)}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def valid_account_number(account_number: Any) -> bool:
    return bool(_ACCOUNT_NUMBER.fullmatch(_text(account_number)))


def valid_phone_number(phone_number: Any) -> bool:
    return bool(_PHONE_NUMBER.fullmatch(_text(phone_number)))


def valid_email(email: Any) -> bool:
    return bool(_EMAIL.fullmatch(_text(email)))


def is_numeric(value: Any) -> bool:
    """True for finite numbers and for strings such as ``"12"`` or ``"12.50"``."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return bool(_NUMERIC.fullmatch(_text(value)))


def valid_amount(amount: Any) -> bool:
    if not isinstance(amount, (int, float, Decimal)) or not is_numeric(amount):
        return False
    return amount >= 0


def format_amount(amount: Any) -> str:
    """Render ``amount`` with exactly two decimals, e.g. ``"100.50"``."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def valid_date_format(date_string: Any) -> bool:
    return bool(_DATE.fullmatch(_text(date_string)))


def parse_date(date_string: Any) -> Optional[date]:
    if not valid_date_format(date_string):
        return None
    try:
        return datetime.strptime(date_string, "%Y-%m-%d").date()
    except ValueError:
        return None


def mask_sensitive(value: Any, visible_chars: int = 4) -> str:
    """Keep ``visible_chars`` characters at each end and star out the rest."""
    text = _text(value)
    if len(text) <= visible_chars * 2:
        return text
    hidden = "*" * (len(text) - visible_chars * 2)
    return f"{text[:visible_chars]}{hidden}{text[-visible_chars:]}"


def bank_name(bank_code: Any) -> Optional[str]:
    return BANK_CODES.get(_text(bank_code))


def valid_bank_code(bank_code: Any) -> bool:
    return _text(bank_code) in BANK_CODES


def mcc_description(mcc_code: Any) -> Optional[str]:
    return MCC_CODES.get(_text(mcc_code))


def valid_mcc_format(mcc_code: Any) -> bool:
    return bool(_MCC.fullmatch(_text(mcc_code)))


def generate_stan(
    source_app_suffix: Any,
    transaction_identifier: Any = None,
    *,
    now: Optional[datetime] = None,
) -> str:
    """
    Build a 12 digit System Trace Audit Number.

    The last four characters of ``source_app_suffix`` are followed by the last
    eight of ``transaction_identifier``, or by ``HHMMSS`` plus centiseconds of
    the current local time when no identifier is given.
    """
    suffix = _text(source_app_suffix)[-4:]
    if transaction_identifier is not None:
        identifier = _text(transaction_identifier)[-8:]
    else:
        moment = now if now is not None else datetime.now()
        identifier = (
            f"{moment.hour:02d}{moment.minute:02d}{moment.second:02d}"
            f"{moment.microsecond // 10_000:02d}"
        )
    return f"{suffix}{identifier}"
