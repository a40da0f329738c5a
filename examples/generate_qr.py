"""
Minimal script that authenticates and generates a QR code through the public API.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from dk_payment_gateway import (
    GatewayError,
    QrGeneration,
    create_client,
    load_gateway_config,
)
from dk_payment_gateway.core.utils import generate_request_id


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a QR code using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing DK_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--base-url",
        help="Override the gateway base URL",
    )
    parser.add_argument(
        "--source-app",
        help="Override the source application identifier (e.g. SRC_AVS_0201)",
    )
    parser.add_argument(
        "--account",
        default="100100148337",
        help="Merchant account number the QR pays into",
    )
    parser.add_argument(
        "--amount",
        type=int,
        default=0,
        help="Fixed amount for a dynamic QR; 0 for a static QR",
    )
    parser.add_argument(
        "--output",
        default="qr_code.png",
        help="Where to write the decoded QR image",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    overrides = _build_overrides(args.set or ())
    parameter_kwargs = {
        key: value
        for key, value in {"base_url": args.base_url, "source_app": args.source_app}.items()
        if value is not None
    }

    try:
        config = load_gateway_config(
            env_file=args.env_file,
            overrides=overrides,
            **parameter_kwargs,
        )
    except (GatewayError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    logging.info("Authenticating against %s", config.base_url)

    try:
        client.authenticate()
        data = client.qr_payment.generate_qr(
            QrGeneration(
                request_id=generate_request_id("QR"),
                currency="BTN",
                bene_account_number=args.account,
                amount=args.amount,
                mcc_code="5411",
                remarks="Example QR",
            )
        )
    except GatewayError as exc:
        logging.error("QR generation failed: %s (code=%s)", exc.message, exc.response_code)
        return 1

    kind = "dynamic" if args.amount > 0 else "static"
    path = client.qr_payment.save_qr_image(data["image"], args.output)
    logging.info("Saved %s QR code to %s", kind, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
