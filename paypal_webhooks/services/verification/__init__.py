"""Webhook signature verification."""

from .signature import (
    SIMULATOR_WEBHOOK_ID,
    SUPPORTED_AUTH_ALGO,
    body_crc32,
    build_signed_message,
    decode_signature,
    verify_signature,
)
from .verifier import WebhookVerifier

__all__ = [
    "SIMULATOR_WEBHOOK_ID",
    "SUPPORTED_AUTH_ALGO",
    "WebhookVerifier",
    "body_crc32",
    "build_signed_message",
    "decode_signature",
    "verify_signature",
]
