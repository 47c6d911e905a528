"""
Command-line verification of a captured PayPal webhook delivery.

Usage:
    python -m paypal_webhooks verify --headers headers.json --body body.json --webhook-id WH-...

Exit codes: 0 valid signature, 1 signature mismatch, 2 verification error
(printed as JSON), 3 bad invocation or unreadable input.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from .core.exceptions import WebhookVerificationError
from .core.logger import setup_structured_logging
from .core.settings import get_settings
from .services.verification.verifier import WebhookVerifier

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2
EXIT_USAGE = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paypal_webhooks", description="PayPal webhook signature verification"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    verify = subparsers.add_parser("verify", help="Verify a captured webhook delivery")
    verify.add_argument(
        "--headers", required=True, help="JSON file with the delivery's HTTP headers"
    )
    verify.add_argument("--body", required=True, help="File with the raw request body")
    verify.add_argument(
        "--webhook-id",
        default=None,
        help="Webhook ID (defaults to PAYPAL_WEBHOOK_ID; use WEBHOOK_ID for simulator events)",
    )
    verify.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (defaults to PAYPAL_LOG_LEVEL)",
    )
    verify.add_argument("--json-logs", action="store_true", help="Emit JSON log records")
    return parser


def _load_headers(path: Path) -> Mapping[str, str]:
    headers = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(headers, dict):
        raise ValueError("Headers file must contain a JSON object")
    return {str(k): str(v) for k, v in headers.items()}


async def _verify(
    verifier: WebhookVerifier, headers: Mapping[str, str], body: bytes, webhook_id: Optional[str]
) -> bool:
    async with verifier:
        return await verifier.verify_request(headers, body, webhook_id)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_structured_logging(
        args.log_level or settings.log_level, json_format=args.json_logs or settings.log_json
    )

    try:
        headers = _load_headers(Path(args.headers))
        body = Path(args.body).read_bytes()
    except (OSError, ValueError) as e:
        logger.error(f"Could not read delivery: {e}")
        return EXIT_USAGE

    verifier = WebhookVerifier.from_settings(settings)
    try:
        valid = asyncio.run(_verify(verifier, headers, body, args.webhook_id))
    except WebhookVerificationError as e:
        print(json.dumps(e.to_dict()))
        return EXIT_ERROR
    except ValueError as e:
        logger.error(str(e))
        return EXIT_USAGE

    print(json.dumps({"valid": valid}))
    return EXIT_VALID if valid else EXIT_INVALID
