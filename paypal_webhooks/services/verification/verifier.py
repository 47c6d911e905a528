"""Webhook verification pipeline: resolve signing key, then check the signature."""

from typing import Mapping, Optional, Union

from loguru import logger

from ...core.exceptions import UnsupportedAuthAlgoError
from ...core.logger import correlation_scope
from ...core.settings import WebhookSettings
from ...models.verifying_key import VerifyingKey
from ...models.webhook_params import WebhookParams, extract_cert_url
from ..certificates.cache import CertificateCache
from ..certificates.loader import CertificateLoader
from .signature import SUPPORTED_AUTH_ALGO, verify_signature


class WebhookVerifier:
    """
    Verify PayPal webhook deliveries.

    Combines a CertificateLoader and a CertificateCache. Both are passed in
    so tests and applications control their lifetime; nothing is global.
    Calls are independent and safe to run concurrently.
    """

    def __init__(
        self,
        loader: Optional[CertificateLoader] = None,
        cache: Optional[CertificateCache] = None,
        webhook_id: Optional[str] = None,
    ):
        """
        Initialize webhook verifier.

        Args:
            loader: Certificate loader (a default one is created if omitted)
            cache: Certificate cache (a default one is created if omitted)
            webhook_id: Default webhook ID used when a call does not pass one
        """
        self.loader = loader or CertificateLoader()
        self.cache = cache or CertificateCache()
        self.webhook_id = webhook_id

    @classmethod
    def from_settings(cls, settings: WebhookSettings) -> "WebhookVerifier":
        """Build a verifier from application settings."""
        loader = CertificateLoader(
            timeout=settings.cert_fetch_timeout,
            allowed_origins=settings.get_cert_origins(),
        )
        cache = CertificateCache(capacity=settings.cert_cache_size)
        return cls(loader=loader, cache=cache, webhook_id=settings.webhook_id)

    async def __aenter__(self) -> "WebhookVerifier":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Release the loader's HTTP session."""
        await self.loader.close()

    async def resolve_key(self, cert_url: str) -> VerifyingKey:
        """
        Get the verifying key for cert_url from the cache, loading it on a miss.

        Raises:
            CertificateError: If the certificate cannot be fetched or trusted
        """
        return await self.cache.get_or_load(cert_url, self.loader.load_verifying_key)

    async def verify_webhook(
        self,
        params: WebhookParams,
        cert_url: str,
        body: Union[bytes, str],
        webhook_id: Optional[str] = None,
    ) -> bool:
        """
        Verify a webhook delivery, fetching and caching the certificate as needed.

        Only a True result authorizes processing the event. False means the
        signature was checked and does not match.

        Args:
            params: Header values from the webhook request
            cert_url: Value of the paypal-cert-url header
            body: Raw request body, exactly as received
            webhook_id: Webhook ID (WEBHOOK_ID for simulator events); defaults
                to the verifier's webhook_id

        Returns:
            True if the signature is valid, False on a mismatch

        Raises:
            CertificateError: If the signing key could not be obtained or trusted
            SignatureValidationError: If the signature inputs are malformed
            ValueError: If no webhook ID is available
        """
        webhook_id = webhook_id if webhook_id is not None else self.webhook_id
        if webhook_id is None:
            raise ValueError("webhook_id is required (none passed and no default configured)")

        with correlation_scope(params.transmission_id):
            # Checked before any network or crypto work
            if params.auth_algo != SUPPORTED_AUTH_ALGO:
                logger.error(f"Unsupported webhook auth algorithm: {params.auth_algo}")
                raise UnsupportedAuthAlgoError(params.auth_algo)

            key = await self.resolve_key(cert_url)
            return verify_signature(params, body, webhook_id, key)

    async def verify_request(
        self,
        headers: Mapping[str, str],
        body: Union[bytes, str],
        webhook_id: Optional[str] = None,
    ) -> bool:
        """
        Verify a delivery straight from its request headers.

        Raises:
            MissingWebhookHeaderError: If a paypal-* header is missing
            CertificateError: If the signing key could not be obtained or trusted
            SignatureValidationError: If the signature inputs are malformed
        """
        params = WebhookParams.from_headers(headers)
        cert_url = extract_cert_url(headers)
        return await self.verify_webhook(params, cert_url, body, webhook_id)
