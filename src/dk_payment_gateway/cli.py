"""
Command-line interface for exercising the DK payment gateway APIs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence, Tuple

from .api import create_client
from .core.client import GatewayClient
from .core.errors import GatewayError
from .core.payloads import CurrentDayStatus, HistoricalStatus, QrGeneration
from .core.utils import generate_request_id, mask_sensitive


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _parse_amount(raw: str) -> Decimal | int:
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid amount: {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise argparse.ArgumentTypeError(f"Invalid amount: {raw!r}")
    return int(value) if value == value.to_integral_value() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dk-payment-gateway",
        description="Authenticate against the DK payment gateway and call its APIs",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing DK_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("authenticate", help="Fetch a token and signing key, then exit")

    qr = commands.add_parser("generate-qr", help="Generate a static or dynamic QR code")
    qr.add_argument("--account", required=True, help="Beneficiary account number")
    qr.add_argument(
        "--amount",
        type=_parse_amount,
        default=0,
        help="Amount to encode; 0 produces a static QR (default: 0)",
    )
    qr.add_argument("--mcc", default="5411", help="Merchant category code (default: 5411)")
    qr.add_argument("--currency", default="BTN", help="Currency code (default: BTN)")
    qr.add_argument("--remarks", help="Optional remarks attached to the QR")
    qr.add_argument("--output", help="Write the decoded QR image to this file")

    status = commands.add_parser("status", help="Check the status of a transaction")
    status.add_argument("--transaction-id", required=True)
    status.add_argument("--account", required=True, help="Beneficiary account number")
    status.add_argument(
        "--date",
        help="Transaction date (YYYY-MM-DD) for transactions from earlier business days",
    )
    return parser


def _generate_qr(client: GatewayClient, args: argparse.Namespace) -> int:
    request = QrGeneration(
        request_id=generate_request_id("QR"),
        currency=args.currency,
        bene_account_number=args.account,
        amount=args.amount,
        mcc_code=args.mcc,
        remarks=args.remarks,
    )
    data = client.qr_payment.generate_qr(request)
    image = data.get("image") if isinstance(data, dict) else None

    logging.info("Generated QR for account %s", mask_sensitive(args.account))
    if args.output:
        if not image:
            logging.error("Gateway response did not contain a QR image")
            return 1
        path = client.qr_payment.save_qr_image(image, args.output)
        logging.info("Saved QR image to %s", path)
    else:
        print(json.dumps(data, indent=2))
    return 0


def _check_status(client: GatewayClient, args: argparse.Namespace) -> int:
    if args.date:
        data = client.transaction_status.check_previous_days(
            HistoricalStatus(
                request_id=generate_request_id("STS"),
                transaction_id=args.transaction_id,
                transaction_date=args.date,
                bene_account_number=args.account,
            )
        )
    else:
        data = client.transaction_status.check_current_day(
            CurrentDayStatus(
                request_id=generate_request_id("STS"),
                transaction_id=args.transaction_id,
                bene_account_number=args.account,
            )
        )
    print(json.dumps(data, indent=2))
    return 0


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    client: Optional[GatewayClient] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    if client is None:
        try:
            client = create_client(env_file=args.env_file, overrides=overrides)
        except (GatewayError, ValueError) as exc:
            logging.error("Invalid configuration: %s", exc)
            return 1

    try:
        client.authenticate()
        logging.info("Authentication succeeded for %s", client.config.source_app)

        if args.command == "generate-qr":
            return _generate_qr(client, args)
        if args.command == "status":
            return _check_status(client, args)
        return 0
    except GatewayError as exc:
        code = f" (response_code={exc.response_code})" if exc.response_code else ""
        logging.error("%s failed: %s%s", args.command, exc.message, code)
        return 1


def main() -> None:
    sys.exit(run_cli())
