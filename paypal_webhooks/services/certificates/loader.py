"""Fetch PayPal signing certificates and extract their RSA verifying keys."""

import asyncio
import base64
import binascii
import re
from typing import Optional, Sequence

import aiohttp
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from loguru import logger

from ...core.enums import PayPalEnvironment
from ...core.exceptions import (
    CertificateFetchError,
    InvalidCertificateUrlError,
    PemParseError,
    RsaKeyParseError,
    X509ParseError,
)
from ...models.verifying_key import VerifyingKey

# Certificates are only trusted from PayPal's own API hosts
ALLOWED_CERT_ORIGINS = tuple(env.cert_origin for env in PayPalEnvironment)

DEFAULT_FETCH_TIMEOUT = 10.0

_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----(?P<body>.*?)-----END (?P=label)-----",
    re.DOTALL,
)


def is_allowed_cert_url(
    cert_url: str, allowed_origins: Sequence[str] = ALLOWED_CERT_ORIGINS
) -> bool:
    """Check that cert_url starts with one of the allowed origin prefixes."""
    return any(cert_url.startswith(origin) for origin in allowed_origins)


def _decode_pem(cert_pem: str) -> bytes:
    """
    Decode the first PEM block into DER bytes.

    Blocks after the first (the rest of a certificate chain) are ignored.

    Raises:
        PemParseError: If there is no block, or the first is not a CERTIFICATE with valid base64
    """
    block = _PEM_BLOCK_RE.search(cert_pem)
    if block is None:
        raise PemParseError("No PEM block found")

    if block.group("label") != "CERTIFICATE":
        raise PemParseError(f"Unexpected PEM label '{block.group('label')}'")

    payload = "".join(block.group("body").split())
    try:
        der = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PemParseError(f"Invalid base64 in PEM block: {e}") from e
    if not der:
        raise PemParseError("Empty PEM block")
    return der


def extract_verifying_key_from_pem(cert_pem: str) -> VerifyingKey:
    """
    Parse a PEM certificate and wrap its RSA public key as a VerifyingKey.

    No network access; the loader calls this after downloading.

    Raises:
        PemParseError: If the first PEM block is missing or malformed
        X509ParseError: If the payload is not a valid X.509 certificate
        RsaKeyParseError: If the certificate does not hold an RSA public key
    """
    try:
        der = _decode_pem(cert_pem)
    except PemParseError as e:
        logger.error(f"Failed to parse certificate PEM: {e}")
        raise

    try:
        cert = x509.load_der_x509_certificate(der)
    except ValueError as e:
        logger.error(f"Failed to parse X.509 certificate: {e}")
        raise X509ParseError(f"Invalid certificate: {e}") from e

    try:
        public_key = cert.public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        logger.error(f"Failed to extract RSA public key: {e}")
        raise RsaKeyParseError(f"Invalid certificate public key: {e}") from e

    if not isinstance(public_key, rsa.RSAPublicKey):
        logger.error(f"Certificate key is not RSA: {type(public_key).__name__}")
        raise RsaKeyParseError(
            f"Certificate public key is {type(public_key).__name__}, not RSA"
        )

    return VerifyingKey(public_key)


class CertificateLoader:
    """
    Download PayPal signing certificates over HTTPS.

    Owns an aiohttp session created on first use, unless one is injected;
    an injected session is left open on close().
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        allowed_origins: Sequence[str] = ALLOWED_CERT_ORIGINS,
    ):
        """
        Initialize certificate loader.

        Args:
            session: Existing aiohttp session to reuse (not closed by the loader)
            timeout: Total timeout for a certificate download in seconds
            allowed_origins: URL prefixes certificates may be fetched from
        """
        if not allowed_origins:
            raise ValueError("At least one allowed certificate origin is required")

        self.timeout = timeout
        self.allowed_origins = tuple(allowed_origins)
        self._http_session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "CertificateLoader":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def _session(self) -> aiohttp.ClientSession:
        """Get HTTP session, creating an owned one on first use."""
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            logger.debug("Certificate loader HTTP session initialized")
        return self._http_session

    async def close(self) -> None:
        """Close the HTTP session if the loader created it."""
        if self._http_session and self._owns_session:
            await self._http_session.close()
            self._http_session = None

    async def fetch_certificate(self, cert_url: str) -> str:
        """
        Download the PEM text at cert_url.

        The body is decoded as UTF-8 with undecodable bytes replaced, so a
        binary response fails later as a PEM parse error.

        Raises:
            CertificateFetchError: On network errors, timeouts or a non-2xx status
        """
        try:
            async with self._session.get(
                cert_url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if not 200 <= response.status < 300:
                    raise CertificateFetchError(
                        f"Certificate request returned HTTP {response.status}",
                        cert_url=cert_url,
                        status=response.status,
                    )
                body = await response.read()
                return body.decode("utf-8", errors="replace")
        except asyncio.TimeoutError as e:
            raise CertificateFetchError(
                f"Certificate request timed out after {self.timeout}s", cert_url=cert_url
            ) from e
        except aiohttp.ClientError as e:
            raise CertificateFetchError(
                f"Failed to fetch {cert_url}: {e}", cert_url=cert_url
            ) from e

    async def load_verifying_key(self, cert_url: str) -> VerifyingKey:
        """
        Fetch the certificate at cert_url and extract its verifying key.

        The origin check runs before any I/O: a URL outside the allowed
        PayPal hosts is rejected without a request being made.

        Raises:
            InvalidCertificateUrlError: If cert_url is not on an allowed origin
            CertificateFetchError: If the download fails
            PemParseError: If the response is not a single PEM block
            X509ParseError: If the PEM payload is not a valid certificate
            RsaKeyParseError: If the certificate does not hold an RSA key
        """
        if not is_allowed_cert_url(cert_url, self.allowed_origins):
            logger.warning(f"Rejected certificate URL outside PayPal origins: {cert_url}")
            raise InvalidCertificateUrlError(cert_url)

        try:
            cert_pem = await self.fetch_certificate(cert_url)
        except CertificateFetchError as e:
            logger.error(f"Certificate fetch failed: {e}")
            raise

        key = extract_verifying_key_from_pem(cert_pem)
        logger.info(f"Loaded PayPal signing certificate from {cert_url}")
        return key
