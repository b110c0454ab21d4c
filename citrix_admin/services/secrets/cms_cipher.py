"""CMS (PKCS#7 enveloped data) encryption of short secrets."""

import logging
from pathlib import Path
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs7

from ...core.exceptions import SecretOperationError


class CmsCipher:
    """Encrypt to a recipient certificate, decrypt with its RSA private key."""

    def encrypt(self, plaintext: str, certificate: x509.Certificate) -> str:
        """Return a PEM encoded CMS message that only the certificate owner can read."""
        try:
            message = (
                pkcs7.PKCS7EnvelopeBuilder()
                .set_data(plaintext.encode("utf-8"))
                .add_recipient(certificate)
                .encrypt(serialization.Encoding.PEM, [])
            )
        except (TypeError, ValueError) as e:
            raise SecretOperationError(f"CMS encryption failed: {e}") from e

        logging.debug(f"Encrypted {len(plaintext)} characters for {certificate.subject.rfc4514_string()}")
        return message.decode("ascii")

    def decrypt(
        self, message: str, certificate: x509.Certificate, private_key: rsa.RSAPrivateKey
    ) -> str:
        try:
            plaintext = pkcs7.pkcs7_decrypt_pem(message.encode("ascii"), certificate, private_key, [])
        except (TypeError, ValueError, UnicodeEncodeError) as e:
            raise SecretOperationError(f"CMS decryption failed: {e}") from e
        return plaintext.decode("utf-8")

    @staticmethod
    def load_private_key(path: str, password: Optional[str] = None) -> rsa.RSAPrivateKey:
        key_path = Path(path)
        if not key_path.is_file():
            raise SecretOperationError(f"Private key not found: {key_path}")

        try:
            key = serialization.load_pem_private_key(
                key_path.read_bytes(), password=password.encode("utf-8") if password else None
            )
        except (TypeError, ValueError) as e:
            raise SecretOperationError(f"Could not load private key {key_path}: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise SecretOperationError(f"CMS decryption needs an RSA key, {key_path} is not one")
        return key
