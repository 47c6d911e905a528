"""Transmission metadata carried by a PayPal webhook delivery."""

from dataclasses import dataclass, field
from typing import Mapping

from ..core.exceptions import MissingWebhookHeaderError

TRANSMISSION_ID_HEADER = "paypal-transmission-id"
TRANSMISSION_TIME_HEADER = "paypal-transmission-time"
TRANSMISSION_SIG_HEADER = "paypal-transmission-sig"
AUTH_ALGO_HEADER = "paypal-auth-algo"
CERT_URL_HEADER = "paypal-cert-url"


def _get_header(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive header lookup; missing or empty values raise."""
    for key, value in headers.items():
        if key.lower() == name:
            if not value:
                break
            return value
    raise MissingWebhookHeaderError(name)


@dataclass(frozen=True)
class WebhookParams:
    """
    Header values PayPal sends with each webhook delivery.

    The signature is computed over
    ``{transmission_id}|{transmission_time}|{webhook_id}|{crc32(body)}``.
    ``transmission_time`` is used literally and never parsed.
    """

    transmission_id: str
    transmission_time: str
    transmission_sig: str = field(repr=False)
    auth_algo: str

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "WebhookParams":
        """
        Build params from the paypal-* headers of a delivery.

        Args:
            headers: Request headers (any casing)

        Returns:
            WebhookParams instance

        Raises:
            MissingWebhookHeaderError: If a required header is missing or empty
        """
        return cls(
            transmission_id=_get_header(headers, TRANSMISSION_ID_HEADER),
            transmission_time=_get_header(headers, TRANSMISSION_TIME_HEADER),
            transmission_sig=_get_header(headers, TRANSMISSION_SIG_HEADER),
            auth_algo=_get_header(headers, AUTH_ALGO_HEADER),
        )


def extract_cert_url(headers: Mapping[str, str]) -> str:
    """Return the paypal-cert-url header value (case-insensitive)."""
    return _get_header(headers, CERT_URL_HEADER)
