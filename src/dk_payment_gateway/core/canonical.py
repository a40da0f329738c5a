"""
Deterministic JSON encoding for signed request bodies.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Mapping

from .errors import SignatureError

__all__ = ["canonical_json"]


def _encode_extra(value: Any) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Decimal value {value} is not finite")
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(payload: Mapping[str, Any]) -> bytes:
    """
    Encode ``payload`` as compact UTF-8 JSON.

    Keys keep the order in which the caller inserted them; the gateway verifies
    the signature over exactly these bytes, so no sorting happens here.
    """
    try:
        text = json.dumps(
            payload,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_encode_extra,
        )
    except (TypeError, ValueError) as exc:
        raise SignatureError(f"Failed to serialize request body: {exc}") from exc
    return text.encode("utf-8")
