"""PayPal webhook signature verification."""

import importlib as _importlib
from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .core.enums import ErrorKind as ErrorKind
    from .core.enums import ErrorStage as ErrorStage
    from .core.exceptions import CertificateError as CertificateError
    from .core.exceptions import SignatureValidationError as SignatureValidationError
    from .core.exceptions import WebhookVerificationError as WebhookVerificationError
    from .core.logger import setup_structured_logging as setup_structured_logging
    from .core.settings import WebhookSettings as WebhookSettings
    from .core.settings import get_settings as get_settings
    from .models.verifying_key import VerifyingKey as VerifyingKey
    from .models.webhook_params import WebhookParams as WebhookParams
    from .services.certificates.cache import CertificateCache as CertificateCache
    from .services.certificates.loader import CertificateLoader as CertificateLoader
    from .services.certificates.loader import (
        extract_verifying_key_from_pem as extract_verifying_key_from_pem,
    )
    from .services.verification.signature import verify_signature as verify_signature
    from .services.verification.verifier import WebhookVerifier as WebhookVerifier

# Explicit lazy-loading map: name -> (module_path, attribute_name)
_LAZY_MODULE_MAP = {
    # Core
    "ErrorKind": ("paypal_webhooks.core.enums", "ErrorKind"),
    "ErrorStage": ("paypal_webhooks.core.enums", "ErrorStage"),
    "CertificateError": ("paypal_webhooks.core.exceptions", "CertificateError"),
    "SignatureValidationError": ("paypal_webhooks.core.exceptions", "SignatureValidationError"),
    "WebhookVerificationError": ("paypal_webhooks.core.exceptions", "WebhookVerificationError"),
    "setup_structured_logging": ("paypal_webhooks.core.logger", "setup_structured_logging"),
    "WebhookSettings": ("paypal_webhooks.core.settings", "WebhookSettings"),
    "get_settings": ("paypal_webhooks.core.settings", "get_settings"),
    # Models
    "VerifyingKey": ("paypal_webhooks.models.verifying_key", "VerifyingKey"),
    "WebhookParams": ("paypal_webhooks.models.webhook_params", "WebhookParams"),
    # Services
    "CertificateCache": ("paypal_webhooks.services.certificates.cache", "CertificateCache"),
    "CertificateLoader": ("paypal_webhooks.services.certificates.loader", "CertificateLoader"),
    "extract_verifying_key_from_pem": (
        "paypal_webhooks.services.certificates.loader",
        "extract_verifying_key_from_pem",
    ),
    "verify_signature": ("paypal_webhooks.services.verification.signature", "verify_signature"),
    "WebhookVerifier": ("paypal_webhooks.services.verification.verifier", "WebhookVerifier"),
}

# Auto-derive __all__ from _LAZY_MODULE_MAP to prevent manual sync issues
__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str) -> Any:
    """Lazy import with explicit mapping - importlib based."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        module = _importlib.import_module(module_path)
        attr = getattr(module, attr_name)
        # Cache in module globals to avoid repeated imports
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
