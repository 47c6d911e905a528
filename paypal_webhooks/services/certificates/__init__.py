"""Certificate download, parsing and caching."""

from .cache import DEFAULT_CACHE_SIZE, CertificateCache
from .loader import (
    ALLOWED_CERT_ORIGINS,
    CertificateLoader,
    extract_verifying_key_from_pem,
    is_allowed_cert_url,
)

__all__ = [
    "ALLOWED_CERT_ORIGINS",
    "DEFAULT_CACHE_SIZE",
    "CertificateCache",
    "CertificateLoader",
    "extract_verifying_key_from_pem",
    "is_allowed_cert_url",
]
