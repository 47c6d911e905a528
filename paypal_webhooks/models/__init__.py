"""Data models for webhook verification."""

from .verifying_key import VerifyingKey
from .webhook_params import (
    AUTH_ALGO_HEADER,
    CERT_URL_HEADER,
    TRANSMISSION_ID_HEADER,
    TRANSMISSION_SIG_HEADER,
    TRANSMISSION_TIME_HEADER,
    WebhookParams,
    extract_cert_url,
)

__all__ = [
    "VerifyingKey",
    "WebhookParams",
    "extract_cert_url",
    "TRANSMISSION_ID_HEADER",
    "TRANSMISSION_TIME_HEADER",
    "TRANSMISSION_SIG_HEADER",
    "AUTH_ALGO_HEADER",
    "CERT_URL_HEADER",
]
