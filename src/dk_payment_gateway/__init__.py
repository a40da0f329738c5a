"""
Public facade for the DK payment gateway client.

The most useful pieces are re-exported here so integrators can write
``from dk_payment_gateway import ...`` without navigating the package.
"""

from .api import connect, create_client
from .core import (
    APIError,
    AccountInquiry,
    AuthenticationError,
    ConfigurationError,
    CurrentDayStatus,
    FundTransfer,
    GatewayClient,
    GatewayConfig,
    GatewayEnvironment,
    GatewayError,
    GatewayParameters,
    HistoricalStatus,
    InvalidParameterError,
    NetworkError,
    PullPaymentAuthorization,
    PullPaymentDebit,
    QrGeneration,
    ResponseEnvelope,
    ResponseParseError,
    SignatureError,
    TransactionError,
    build_environment,
    canonical_json,
    load_env_file,
    load_gateway_config,
    sign_request,
    verify_signature,
)

__version__ = "0.1.0"

__all__ = (
    "APIError",
    "AccountInquiry",
    "AuthenticationError",
    "ConfigurationError",
    "CurrentDayStatus",
    "FundTransfer",
    "GatewayClient",
    "GatewayConfig",
    "GatewayEnvironment",
    "GatewayError",
    "GatewayParameters",
    "HistoricalStatus",
    "InvalidParameterError",
    "NetworkError",
    "PullPaymentAuthorization",
    "PullPaymentDebit",
    "QrGeneration",
    "ResponseEnvelope",
    "ResponseParseError",
    "SignatureError",
    "TransactionError",
    "build_environment",
    "canonical_json",
    "connect",
    "create_client",
    "load_env_file",
    "load_gateway_config",
    "sign_request",
    "verify_signature",
)
