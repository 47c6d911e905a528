"""RSA verifying key bound to the PKCS1v15 / SHA-256 scheme PayPal signs with."""

from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..core.exceptions import InvalidSignatureEncodingError


@dataclass(frozen=True, eq=False)
class VerifyingKey:
    """
    Immutable RSA public key plus the fixed PKCS1v15 + SHA-256 scheme.

    Instances are shared between the certificate cache and concurrent
    verifications; nothing mutates them after construction.
    """

    public_key: rsa.RSAPublicKey

    @property
    def modulus_size(self) -> int:
        """Length of the modulus in bytes, which is also the signature length."""
        return (self.public_key.key_size + 7) // 8

    def check_signature_encoding(self, signature: bytes) -> None:
        """
        Ensure raw signature bytes form a PKCS1v15 signature for this key.

        A signature must be exactly as long as the modulus and, read as a
        big-endian integer, smaller than it.

        Raises:
            InvalidSignatureEncodingError: If the bytes cannot be a signature for this key
        """
        if len(signature) != self.modulus_size:
            raise InvalidSignatureEncodingError(
                f"Signature is {len(signature)} bytes, expected {self.modulus_size}",
                length=len(signature),
            )
        if int.from_bytes(signature, "big") >= self.public_key.public_numbers().n:
            raise InvalidSignatureEncodingError(
                "Signature representative out of range", length=len(signature)
            )

    def verify(self, message: bytes, signature: bytes) -> bool:
        """
        Verify a signature over message.

        Returns:
            True on a cryptographic match, False otherwise
        """
        try:
            self.public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerifyingKey):
            return NotImplemented
        return self.public_key.public_numbers() == other.public_key.public_numbers()

    def __hash__(self) -> int:
        numbers = self.public_key.public_numbers()
        return hash((numbers.n, numbers.e))
