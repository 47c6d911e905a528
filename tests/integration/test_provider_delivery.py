"""End-to-end verification of a captured PayPal simulator delivery."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from paypal_webhooks import (
    CertificateCache,
    CertificateLoader,
    ErrorStage,
    WebhookVerificationError,
    WebhookVerifier,
)
from paypal_webhooks.core.exceptions import InvalidCertificateUrlError

pytestmark = pytest.mark.integration

EVIL_URL = "https://evil.example.com/cert.pem"


@pytest.fixture
def provider_headers(provider_headers_file):
    """Captured delivery headers."""
    return json.loads(provider_headers_file.read_text(encoding="utf-8"))


@pytest.fixture
def provider_session(mock_session, response_factory, provider_cert_pem):
    """Session that serves PayPal's certificate for any GET."""
    mock_session.get = MagicMock(
        side_effect=lambda *a, **kw: response_factory(200, provider_cert_pem)
    )
    return mock_session


@pytest.fixture
def verifier(provider_session):
    """Verifier wired to the mocked session."""
    return WebhookVerifier(
        loader=CertificateLoader(session=provider_session),
        cache=CertificateCache(),
        webhook_id="WEBHOOK_ID",
    )


@pytest.mark.asyncio
async def test_simulator_delivery_verifies(verifier, provider_headers, provider_body):
    """Headers, body and certificate from the simulator verify end to end."""
    async with verifier:
        assert await verifier.verify_request(provider_headers, provider_body) is True


@pytest.mark.asyncio
async def test_single_character_change_rejected(verifier, provider_headers, provider_body):
    """Changing one character of the amount yields a mismatch."""
    altered = provider_body.replace(b'"value":"30.00"', b'"value":"31.00"', 1)
    async with verifier:
        assert await verifier.verify_request(provider_headers, altered) is False


@pytest.mark.asyncio
async def test_certificate_fetched_once(
    verifier, provider_session, provider_headers, provider_body
):
    """Repeated deliveries signed with one certificate download it once."""
    async with verifier:
        results = [
            await verifier.verify_request(provider_headers, provider_body) for _ in range(3)
        ]

    assert results == [True, True, True]
    assert provider_session.get.call_count == 1


@pytest.mark.asyncio
async def test_concurrent_deliveries(verifier, provider_headers, provider_body):
    """Concurrent verifications share the verifier safely."""
    async with verifier:
        results = await asyncio.gather(
            *(verifier.verify_request(provider_headers, provider_body) for _ in range(8))
        )
    assert all(results)
    assert len(verifier.cache) == 1


@pytest.mark.asyncio
async def test_spoofed_cert_url(verifier, provider_session, provider_headers, provider_body):
    """A spoofed certificate URL is rejected without contacting it."""
    headers = dict(provider_headers, **{"paypal-cert-url": EVIL_URL})

    with pytest.raises(WebhookVerificationError) as exc_info:
        await verifier.verify_request(headers, provider_body)

    assert isinstance(exc_info.value, InvalidCertificateUrlError)
    assert exc_info.value.stage is ErrorStage.CERTIFICATE
    provider_session.get.assert_not_called()


@pytest.mark.asyncio
async def test_real_webhook_id_does_not_match(verifier, provider_headers, provider_body):
    """Simulator deliveries only verify with the literal WEBHOOK_ID."""
    result = await verifier.verify_request(
        provider_headers, provider_body, "8PT597110X687430LKGECATA"
    )
    assert result is False


@pytest.mark.network
@pytest.mark.asyncio
async def test_live_certificate_download(provider_headers):
    """PayPal's certificate endpoint serves a parsable RSA certificate."""
    async with CertificateLoader() as loader:
        key = await loader.load_verifying_key(provider_headers["paypal-cert-url"])
    assert key.public_key.key_size >= 2048
