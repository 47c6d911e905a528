"""Webhook signature verification against an already loaded key."""

import base64
import binascii
import zlib
from typing import Union

from loguru import logger

from ...core.exceptions import (
    InvalidSignatureBase64Error,
    InvalidSignatureEncodingError,
    UnsupportedAuthAlgoError,
)
from ...models.verifying_key import VerifyingKey
from ...models.webhook_params import WebhookParams
from ...utils.masking import truncate_for_log

# PayPal currently only signs webhooks with this algorithm
SUPPORTED_AUTH_ALGO = "SHA256withRSA"

# Webhook ID PayPal's Webhook Simulator signs with instead of a real one
SIMULATOR_WEBHOOK_ID = "WEBHOOK_ID"


def _as_bytes(body: Union[bytes, str]) -> bytes:
    if isinstance(body, str):
        return body.encode("utf-8")
    return body


def body_crc32(body: Union[bytes, str]) -> int:
    """
    CRC-32 of the raw request body as an unsigned 32-bit integer.

    The body must be the exact bytes received. Re-serializing parsed JSON
    changes field order or whitespace and breaks verification.
    """
    return zlib.crc32(_as_bytes(body)) & 0xFFFFFFFF


def build_signed_message(
    transmission_id: str, transmission_time: str, webhook_id: str, body: Union[bytes, str]
) -> str:
    """Build the pipe-delimited string PayPal signs."""
    return f"{transmission_id}|{transmission_time}|{webhook_id}|{body_crc32(body)}"


def decode_signature(transmission_sig: str) -> bytes:
    """
    Decode the transmission signature (standard, padded base64).

    Raises:
        InvalidSignatureBase64Error: If the value is not valid base64
    """
    try:
        return base64.b64decode(transmission_sig, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Failed to decode signature {truncate_for_log(transmission_sig)}: {e}")
        raise InvalidSignatureBase64Error(f"Signature could not be base64 decoded: {e}") from e


def verify_signature(
    params: WebhookParams,
    body: Union[bytes, str],
    webhook_id: str,
    key: VerifyingKey,
) -> bool:
    """
    Verify a PayPal webhook signature using a pre-loaded verifying key.

    Use this when managing certificates yourself; WebhookVerifier handles
    fetching and caching.

    Args:
        params: Header values from the webhook request
        body: Raw request body, exactly as received
        webhook_id: Webhook ID from the PayPal dashboard (WEBHOOK_ID for simulator events)
        key: Key extracted from PayPal's signing certificate

    Returns:
        True if the signature matches, False if it does not

    Raises:
        UnsupportedAuthAlgoError: If auth_algo is not SHA256withRSA
        InvalidSignatureBase64Error: If the signature is not valid base64
        InvalidSignatureEncodingError: If the decoded bytes cannot be a signature for key
    """
    if params.auth_algo != SUPPORTED_AUTH_ALGO:
        logger.error(f"Unsupported webhook auth algorithm: {params.auth_algo}")
        raise UnsupportedAuthAlgoError(params.auth_algo)

    message = build_signed_message(
        params.transmission_id, params.transmission_time, webhook_id, body
    )

    signature = decode_signature(params.transmission_sig)
    try:
        key.check_signature_encoding(signature)
    except InvalidSignatureEncodingError as e:
        logger.error(f"Failed to parse signature: {e}")
        raise

    if key.verify(message.encode("utf-8"), signature):
        logger.debug(f"PayPal webhook signature verified (transmission {params.transmission_id})")
        return True

    logger.warning(
        f"PayPal webhook signature verification failed (transmission {params.transmission_id})"
    )
    return False
