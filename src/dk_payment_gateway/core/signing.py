"""
Request signing for the DK payment gateway.

Every signed request carries three headers. ``DK-Signature`` holds an RS256
JWT whose claims are the base64 encoded canonical body, the timestamp and the
nonce. ``DK-Timestamp`` and ``DK-Nonce`` repeat the last two in clear text.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .canonical import canonical_json
from .errors import SignatureError

__all__ = [
    "SIGNATURE_SCHEME",
    "build_signing_payload",
    "generate_nonce",
    "generate_timestamp",
    "load_private_key",
    "sign_canonical",
    "sign_request",
    "verify_signature",
]

SIGNATURE_SCHEME = "DKSignature"
SIGNATURE_HEADER = "DK-Signature"
TIMESTAMP_HEADER = "DK-Timestamp"
NONCE_HEADER = "DK-Nonce"

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

KeyInput = Union[str, bytes, rsa.RSAPrivateKey]


def generate_timestamp(now: Optional[datetime] = None) -> str:
    """Return ``now`` (default: the current time) as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC."""
    moment = now if now is not None else datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(_TIMESTAMP_FORMAT)


def generate_nonce() -> str:
    """32 lowercase hex characters drawn from 16 secure random bytes."""
    return secrets.token_hex(16)


def load_private_key(private_key: KeyInput) -> rsa.RSAPrivateKey:
    if isinstance(private_key, rsa.RSAPrivateKey):
        return private_key
    data = private_key.encode("utf-8") if isinstance(private_key, str) else private_key
    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SignatureError(f"Failed to load private key: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SignatureError(f"Expected RSA private key, got {type(key).__name__}")
    return key


def build_signing_payload(raw_body: bytes, timestamp: str, nonce: str) -> Dict[str, str]:
    return {
        "data": base64.b64encode(raw_body).decode("ascii"),
        "timestamp": timestamp,
        "nonce": nonce,
    }


def sign_canonical(
    private_key: KeyInput,
    raw_body: bytes,
    *,
    now: Optional[datetime] = None,
    nonce: Optional[str] = None,
) -> Dict[str, str]:
    """
    Sign an already canonicalized body and return the transport headers.

    ``now`` and ``nonce`` exist for deterministic tests; production callers
    leave them unset so every call gets a fresh timestamp and nonce.
    """
    timestamp = generate_timestamp(now)
    nonce_value = nonce if nonce is not None else generate_nonce()
    key = load_private_key(private_key)
    payload = build_signing_payload(raw_body, timestamp, nonce_value)

    try:
        token = jwt.encode(payload, key, algorithm="RS256")
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise SignatureError(f"Failed to generate signature: {exc}") from exc

    logging.debug("Signed request body (timestamp=%s, nonce=%s)", timestamp, nonce_value)
    return {
        SIGNATURE_HEADER: f"{SIGNATURE_SCHEME} {token}",
        TIMESTAMP_HEADER: timestamp,
        NONCE_HEADER: nonce_value,
    }


def sign_request(
    private_key: KeyInput,
    request_body: Mapping[str, Any],
    *,
    now: Optional[datetime] = None,
    nonce: Optional[str] = None,
) -> Dict[str, str]:
    """Canonicalize ``request_body`` and sign it with ``private_key``."""
    return sign_canonical(private_key, canonical_json(request_body), now=now, nonce=nonce)


def verify_signature(
    public_key: Any,
    headers: Mapping[str, str],
    request_body: Union[Mapping[str, Any], bytes],
) -> bool:
    """
    Check signature headers the way the gateway does.

    ``request_body`` is either the mapping that was signed or the raw bytes
    that were transmitted. Returns ``False`` for any mismatch instead of
    raising.
    """
    header = headers.get(SIGNATURE_HEADER, "")
    prefix = f"{SIGNATURE_SCHEME} "
    if not header.startswith(prefix):
        return False
    token = header[len(prefix):]

    try:
        claims = jwt.decode(token, public_key, algorithms=["RS256"])
    except jwt.PyJWTError:
        return False

    raw = request_body if isinstance(request_body, bytes) else canonical_json(request_body)
    try:
        signed_body = base64.b64decode(claims.get("data", ""), validate=True)
    except (binascii.Error, ValueError, TypeError):
        return False

    return (
        signed_body == raw
        and claims.get("timestamp") == headers.get(TIMESTAMP_HEADER)
        and claims.get("nonce") == headers.get(NONCE_HEADER)
    )
