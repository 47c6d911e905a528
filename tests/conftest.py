"""Pytest configuration and common fixtures."""

import base64
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Union
from unittest.mock import AsyncMock, MagicMock

from dotenv import load_dotenv

# Try to load test-specific environment file if it exists
test_env_file = Path(__file__).parent / ".env.test"
if test_env_file.exists():
    load_dotenv(test_env_file)

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.x509.oid import NameOID
from loguru import logger

from paypal_webhooks.core.settings import reset_settings
from paypal_webhooks.models.verifying_key import VerifyingKey
from paypal_webhooks.models.webhook_params import WebhookParams
from paypal_webhooks.services.verification.signature import build_signed_message

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate every test from PAYPAL_* variables and the settings singleton."""
    for name in list(os.environ):
        if name.startswith("PAYPAL_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(Path(__file__).parent)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def log_records() -> Any:
    """Capture Loguru records emitted during the test."""
    records: List[Dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


# Provider data: a real PayPal simulator delivery and its signing certificate


@pytest.fixture(scope="session")
def provider_cert_pem() -> str:
    """PayPal's message verification certificate."""
    return (DATA_DIR / "provider_cert.pem").read_text(encoding="ascii")


@pytest.fixture(scope="session")
def provider_body() -> bytes:
    """Raw body of the simulator delivery, byte for byte."""
    return (DATA_DIR / "provider_event.json").read_bytes().rstrip(b"\r\n")


@pytest.fixture(scope="session")
def provider_headers_file() -> Path:
    """Path to the captured delivery headers."""
    return DATA_DIR / "provider_headers.json"


@pytest.fixture
def provider_params(provider_headers_file) -> WebhookParams:
    """Transmission metadata of the simulator delivery."""
    headers = json.loads(provider_headers_file.read_text(encoding="utf-8"))
    return WebhookParams.from_headers(headers)


# Throwaway signer for tests that need to produce their own signatures


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """2048-bit RSA signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def make_certificate_pem(private_key: Any) -> str:
    """Build a self-signed certificate for private_key and return it as PEM."""
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "PayPal, Inc."),
            x509.NameAttribute(NameOID.COMMON_NAME, "messageverificationcerts.paypal.com"),
        ]
    )
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def cert_pem(rsa_private_key) -> str:
    """Self-signed RSA certificate PEM."""
    return make_certificate_pem(rsa_private_key)


@pytest.fixture(scope="session")
def ec_cert_pem() -> str:
    """Self-signed certificate carrying an EC key instead of RSA."""
    return make_certificate_pem(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def verifying_key(rsa_private_key) -> VerifyingKey:
    """VerifyingKey for the throwaway signer."""
    return VerifyingKey(rsa_private_key.public_key())


@pytest.fixture
def sign_webhook(rsa_private_key) -> Callable[..., WebhookParams]:
    """Factory producing WebhookParams signed by the throwaway key."""

    def _sign(
        body: bytes,
        webhook_id: str = "WH-TEST-1",
        transmission_id: str = "b2a1c3d4-0000-11f0-8000-000000000001",
        transmission_time: str = "2025-11-28T10:00:24Z",
        auth_algo: str = "SHA256withRSA",
    ) -> WebhookParams:
        message = build_signed_message(transmission_id, transmission_time, webhook_id, body)
        signature = rsa_private_key.sign(
            message.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256()
        )
        return WebhookParams(
            transmission_id=transmission_id,
            transmission_time=transmission_time,
            transmission_sig=base64.b64encode(signature).decode("ascii"),
            auth_algo=auth_algo,
        )

    return _sign


@pytest.fixture
def event_body() -> bytes:
    """A small webhook event body."""
    return b'{"id":"WH-1","event_type":"PAYMENT.CAPTURE.COMPLETED","resource":{"id":"C-1"}}'


# aiohttp mocks


def make_response(status: int = 200, body: Union[str, bytes] = b"") -> AsyncMock:
    """Mock aiohttp response usable as an async context manager."""
    raw = body.encode("utf-8") if isinstance(body, str) else body
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.read = AsyncMock(return_value=raw)
    mock_response.headers = {}
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)
    return mock_response


@pytest.fixture
def mock_session() -> MagicMock:
    """Mock aiohttp session; tests set session.get.return_value or side_effect."""
    session = MagicMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def response_factory() -> Callable[..., AsyncMock]:
    """Factory for mock aiohttp responses."""
    return make_response
