"""
Exception hierarchy raised by the DK payment gateway client.

Every error carries the gateway's response envelope fields verbatim (when the
failure originated from a gateway response) so callers can branch on
``response_code``.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

__all__ = [
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "GatewayError",
    "InvalidParameterError",
    "NetworkError",
    "ResponseParseError",
    "SignatureError",
    "TransactionError",
]

_ENVELOPE_FIELDS = (
    "response_code",
    "response_message",
    "response_description",
    "response_detail",
)


class GatewayError(Exception):
    """Base class for every error raised by this package."""

    def __init__(
        self,
        message: str,
        *,
        response_code: Optional[str] = None,
        response_message: Optional[str] = None,
        response_description: Optional[str] = None,
        response_detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response_code = response_code
        self.response_message = response_message
        self.response_description = response_description
        self.response_detail = response_detail

    @classmethod
    def from_envelope(cls, message: str, body: Mapping[str, Any], **kwargs: Any):
        """Build an error copying the envelope fields present in ``body``."""
        fields = {key: body.get(key) for key in _ENVELOPE_FIELDS}
        fields.update(kwargs)
        return cls(message, **fields)

    def envelope_fields(self) -> dict:
        return {key: getattr(self, key) for key in _ENVELOPE_FIELDS}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, response_code={self.response_code!r})"


class ConfigurationError(GatewayError):
    """Raised when the client configuration is missing or invalid."""


class AuthenticationError(GatewayError):
    """Raised when the access token or the signing key cannot be obtained."""


class InvalidParameterError(GatewayError):
    """
    Raised for malformed request parameters.

    Local validation failures populate :attr:`violations`; 4xx responses from
    the gateway populate the envelope fields instead.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.violations: List[str] = list(violations or ())


class SignatureError(GatewayError):
    """Raised when a request body cannot be canonicalized or signed."""


class NetworkError(GatewayError):
    """Raised when the HTTP exchange fails below the application layer."""


class APIError(GatewayError):
    """Raised for 5xx and unexpected responses from the gateway."""


class TransactionError(APIError):
    """Raised when a well-formed envelope carries a non-success code."""


class ResponseParseError(APIError):
    """Raised when a response body does not match the envelope schema."""
