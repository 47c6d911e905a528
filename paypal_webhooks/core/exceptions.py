"""Custom exception classes for PayPal webhook verification.

Every failure carries a ``stage`` (certificate resolution or signature
validation) and a ``kind`` so callers can pattern-match on either:

    try:
        valid = await verifier.verify_webhook(params, cert_url, body, webhook_id)
    except WebhookVerificationError as e:
        match e.stage:
            case ErrorStage.CERTIFICATE: ...
            case ErrorStage.VALIDATION: ...

A signature that simply does not match is not an error; it is returned as
``False`` by the verifier.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .enums import ErrorKind, ErrorStage


class WebhookVerificationError(Exception):
    """Base exception for webhook verification."""

    kind: ErrorKind

    def __init__(
        self, message: str, recoverable: bool = False, details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize verification error.

        Args:
            message: Error message
            recoverable: Whether retrying the same call may succeed
            details: Additional error details
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    @property
    def stage(self) -> ErrorStage:
        """Pipeline stage the error was raised from."""
        return self.kind.stage

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "stage": self.stage.value,
            "kind": self.kind.value,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


# Certificate resolution errors
class CertificateError(WebhookVerificationError):
    """Signing certificate could not be obtained or trusted."""


class InvalidCertificateUrlError(CertificateError):
    """Certificate URL does not point at a PayPal API origin."""

    kind = ErrorKind.INVALID_CERTIFICATE_URL

    def __init__(self, cert_url: str):
        self.cert_url = cert_url
        super().__init__(f"Invalid certificate URL: {cert_url}", details={"cert_url": cert_url})


class CertificateFetchError(CertificateError):
    """Downloading the certificate failed."""

    kind = ErrorKind.FETCH_FAILED

    def __init__(
        self,
        message: str = "Failed to fetch certificate",
        cert_url: Optional[str] = None,
        status: Optional[int] = None,
    ):
        """
        Initialize fetch error.

        Args:
            message: Error message
            cert_url: URL that was requested
            status: HTTP status code, when the server answered with a non-success status
        """
        self.cert_url = cert_url
        self.status = status
        details: Dict[str, Any] = {"cert_url": cert_url}
        if status is not None:
            details["status"] = status
        super().__init__(message, recoverable=True, details=details)


class PemParseError(CertificateError):
    """Certificate body is not a single well-formed PEM block."""

    kind = ErrorKind.PEM_PARSE

    def __init__(self, message: str = "Failed to deserialize certificate PEM"):
        super().__init__(message)


class X509ParseError(CertificateError):
    """PEM payload is not a valid X.509 certificate."""

    kind = ErrorKind.X509_PARSE

    def __init__(self, message: str = "Invalid X.509 certificate"):
        super().__init__(message)


class RsaKeyParseError(CertificateError):
    """Certificate does not carry a usable RSA public key."""

    kind = ErrorKind.RSA_KEY_PARSE

    def __init__(self, message: str = "Certificate does not contain a valid RSA public key"):
        super().__init__(message)


# Signature validation errors
class SignatureValidationError(WebhookVerificationError):
    """Webhook signature inputs are malformed or unsupported."""


class UnsupportedAuthAlgoError(SignatureValidationError):
    """Signing algorithm other than SHA256withRSA."""

    kind = ErrorKind.UNSUPPORTED_AUTH_ALGO

    def __init__(self, auth_algo: str):
        self.auth_algo = auth_algo
        super().__init__(
            f"Unsupported authentication algorithm {auth_algo}",
            details={"auth_algo": auth_algo},
        )


class InvalidSignatureBase64Error(SignatureValidationError):
    """Transmission signature is not valid standard base64."""

    kind = ErrorKind.INVALID_SIGNATURE_BASE64

    def __init__(self, message: str = "Signature could not be base64 decoded"):
        super().__init__(message)


class InvalidSignatureEncodingError(SignatureValidationError):
    """Decoded signature bytes do not form an RSA signature for the key."""

    kind = ErrorKind.INVALID_SIGNATURE_ENCODING

    def __init__(
        self, message: str = "Signature could not be decoded", length: Optional[int] = None
    ):
        details = {"length": length} if length is not None else {}
        super().__init__(message, details=details)


class MissingWebhookHeaderError(SignatureValidationError):
    """A required paypal-* delivery header is absent or empty."""

    kind = ErrorKind.MISSING_HEADER

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"Missing webhook header '{header}'", details={"header": header})
