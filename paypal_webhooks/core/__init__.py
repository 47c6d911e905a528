"""Core components: configuration, logging, errors."""

from .enums import ErrorKind, ErrorStage, PayPalEnvironment
from .exceptions import (
    CertificateError,
    CertificateFetchError,
    InvalidCertificateUrlError,
    InvalidSignatureBase64Error,
    InvalidSignatureEncodingError,
    MissingWebhookHeaderError,
    PemParseError,
    RsaKeyParseError,
    SignatureValidationError,
    UnsupportedAuthAlgoError,
    WebhookVerificationError,
    X509ParseError,
)

__all__ = [
    "ErrorKind",
    "ErrorStage",
    "PayPalEnvironment",
    "WebhookVerificationError",
    "CertificateError",
    "InvalidCertificateUrlError",
    "CertificateFetchError",
    "PemParseError",
    "X509ParseError",
    "RsaKeyParseError",
    "SignatureValidationError",
    "UnsupportedAuthAlgoError",
    "InvalidSignatureBase64Error",
    "InvalidSignatureEncodingError",
    "MissingWebhookHeaderError",
]
