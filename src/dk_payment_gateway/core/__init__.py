"""
Core primitives: configuration, signing, authentication and transport.
"""

from .auth import Authenticator
from .canonical import canonical_json
from .client import GatewayClient
from .config import GatewayConfig, GatewayParameters, load_gateway_config
from .envelope import SUCCESS_CODE, ResponseEnvelope
from .environment import GatewayEnvironment, build_environment, load_env_file
from .errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    InvalidParameterError,
    NetworkError,
    ResponseParseError,
    SignatureError,
    TransactionError,
)
from .operations import IntraTransaction, PullPayment, QrPayment, TransactionStatus
from .payloads import (
    AccountInquiry,
    CurrentDayStatus,
    FundTransfer,
    HistoricalStatus,
    PullPaymentAuthorization,
    PullPaymentDebit,
    QrGeneration,
)
from .session import GatewaySession
from .signing import (
    build_signing_payload,
    generate_nonce,
    generate_timestamp,
    sign_canonical,
    sign_request,
    verify_signature,
)
from .transport import Transport

__all__ = [
    "APIError",
    "AccountInquiry",
    "AuthenticationError",
    "Authenticator",
    "ConfigurationError",
    "CurrentDayStatus",
    "FundTransfer",
    "GatewayClient",
    "GatewayConfig",
    "GatewayEnvironment",
    "GatewayError",
    "GatewayParameters",
    "GatewaySession",
    "HistoricalStatus",
    "IntraTransaction",
    "InvalidParameterError",
    "NetworkError",
    "PullPayment",
    "PullPaymentAuthorization",
    "PullPaymentDebit",
    "QrGeneration",
    "QrPayment",
    "ResponseEnvelope",
    "ResponseParseError",
    "SUCCESS_CODE",
    "SignatureError",
    "TransactionError",
    "TransactionStatus",
    "Transport",
    "build_environment",
    "build_signing_payload",
    "canonical_json",
    "generate_nonce",
    "generate_timestamp",
    "load_env_file",
    "load_gateway_config",
    "sign_canonical",
    "sign_request",
    "verify_signature",
]
