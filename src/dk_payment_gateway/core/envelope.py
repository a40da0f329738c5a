"""
Parsed form of the gateway's JSON response envelope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from .errors import ResponseParseError, TransactionError

__all__ = ["SUCCESS_CODE", "ResponseEnvelope"]

SUCCESS_CODE = "0000"


def _optional_text(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class ResponseEnvelope:
    response_code: str
    response_message: Optional[str] = None
    response_detail: Optional[str] = None
    response_description: Optional[str] = None
    response_data: Any = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "ResponseEnvelope":
        """
        Validate ``payload`` against the envelope schema.

        Anything that is not a JSON object with a string ``response_code`` is
        rejected with :class:`ResponseParseError`.
        """
        if not isinstance(payload, Mapping):
            raise ResponseParseError(
                f"Expected a JSON object response, got {type(payload).__name__}"
            )
        code = payload.get("response_code")
        if not isinstance(code, str) or not code:
            raise ResponseParseError(
                "Response is missing a response_code",
                response_message=_optional_text(payload, "response_message"),
                response_detail=_optional_text(payload, "response_detail"),
                response_description=_optional_text(payload, "response_description"),
            )
        return cls(
            response_code=code,
            response_message=_optional_text(payload, "response_message"),
            response_detail=_optional_text(payload, "response_detail"),
            response_description=_optional_text(payload, "response_description"),
            response_data=payload.get("response_data"),
            raw=dict(payload),
        )

    @property
    def success(self) -> bool:
        return self.response_code == SUCCESS_CODE

    def error_message(self, preference: Sequence[str]) -> str:
        for key in preference:
            value = getattr(self, key, None)
            if value:
                return value
        return "Unknown error"

    def ensure_success(
        self,
        operation: str,
        preference: Sequence[str] = ("response_description", "response_message"),
    ) -> "ResponseEnvelope":
        """Raise :class:`TransactionError` unless the code is ``"0000"``."""
        if self.success:
            return self
        raise TransactionError(
            f"{operation} failed: {self.error_message(preference)}",
            response_code=self.response_code,
            response_message=self.response_message,
            response_description=self.response_description,
            response_detail=self.response_detail,
        )
