"""Centralized enum definitions for PayPal webhook verification."""

from enum import Enum


class ErrorStage(str, Enum):
    """Pipeline stage a verification error belongs to."""

    CERTIFICATE = "certificate"
    VALIDATION = "validation"

    @classmethod
    def values(cls) -> list:
        """Return list of all enum values."""
        return [e.value for e in cls]


class ErrorKind(str, Enum):
    """Specific failure kinds, tagged with the stage they occur in."""

    # Certificate resolution
    INVALID_CERTIFICATE_URL = "invalid_certificate_url"
    FETCH_FAILED = "fetch_failed"
    PEM_PARSE = "pem_parse"
    X509_PARSE = "x509_parse"
    RSA_KEY_PARSE = "rsa_key_parse"

    # Signature validation
    UNSUPPORTED_AUTH_ALGO = "unsupported_auth_algo"
    INVALID_SIGNATURE_BASE64 = "invalid_signature_base64"
    INVALID_SIGNATURE_ENCODING = "invalid_signature_encoding"
    MISSING_HEADER = "missing_header"

    @property
    def stage(self) -> ErrorStage:
        """Stage this kind of failure is raised from."""
        if self in _CERTIFICATE_KINDS:
            return ErrorStage.CERTIFICATE
        return ErrorStage.VALIDATION

    @classmethod
    def values(cls) -> list:
        """Return list of all enum values."""
        return [e.value for e in cls]


_CERTIFICATE_KINDS = frozenset(
    {
        ErrorKind.INVALID_CERTIFICATE_URL,
        ErrorKind.FETCH_FAILED,
        ErrorKind.PEM_PARSE,
        ErrorKind.X509_PARSE,
        ErrorKind.RSA_KEY_PARSE,
    }
)


class PayPalEnvironment(str, Enum):
    """PayPal API environments that sign webhook deliveries."""

    LIVE = "live"
    SANDBOX = "sandbox"

    @property
    def cert_origin(self) -> str:
        """Origin prefix certificate URLs for this environment must start with."""
        if self is PayPalEnvironment.LIVE:
            return "https://api.paypal.com/"
        return "https://api.sandbox.paypal.com/"
