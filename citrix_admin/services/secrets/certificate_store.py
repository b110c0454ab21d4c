"""Certificate lookup for CMS document encryption."""

import logging
import ssl
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from cryptography import x509

from ...core.exceptions import SecretOperationError

DOCUMENT_ENCRYPTION_OID = x509.ObjectIdentifier("1.3.6.1.4.1.311.80.1")
CERTIFICATE_SUFFIXES = {".pem", ".crt", ".cer"}


class CertificateStore:
    """
    Finds the certificate used to encrypt secrets.

    Looks in a directory of PEM/DER files and, on Windows, in the
    CurrentUser\\My system store.
    """

    def __init__(self, certificate_directory: str = "", include_system_store: Optional[bool] = None):
        self._directory = Path(certificate_directory) if certificate_directory else None
        if include_system_store is None:
            include_system_store = sys.platform == "win32"
        self._include_system_store = include_system_store

    def list_certificates(self) -> List[x509.Certificate]:
        certificates = list(self._load_directory())
        if self._include_system_store:
            certificates.extend(self._load_system_store())
        logging.debug(f"Loaded {len(certificates)} certificate(s)")
        return certificates

    def find_encryption_certificate(self, subject: Optional[str] = None) -> x509.Certificate:
        """
        Return the usable encryption certificate with the latest expiry.

        Raises:
            SecretOperationError: If no certificate matches.
        """
        now = datetime.now(timezone.utc)
        candidates = [
            cert
            for cert in self.list_certificates()
            if self._subject_matches(cert, subject)
            and cert.not_valid_before_utc <= now <= cert.not_valid_after_utc
            and self._allows_encryption(cert)
        ]

        if not candidates:
            raise SecretOperationError(
                f"No valid document encryption certificate found for subject '{subject or '*'}'"
            )

        chosen = max(candidates, key=lambda cert: cert.not_valid_after_utc)
        logging.info(
            f"Using certificate {chosen.subject.rfc4514_string()} "
            f"(expires {chosen.not_valid_after_utc:%Y-%m-%d})"
        )
        return chosen

    def _load_directory(self) -> Iterable[x509.Certificate]:
        if not self._directory:
            return
        if not self._directory.is_dir():
            logging.warning(f"Certificate directory does not exist: {self._directory}")
            return

        for path in sorted(self._directory.iterdir()):
            if path.suffix.lower() not in CERTIFICATE_SUFFIXES or not path.is_file():
                continue
            data = path.read_bytes()
            try:
                if b"-----BEGIN CERTIFICATE-----" in data:
                    yield from x509.load_pem_x509_certificates(data)
                else:
                    yield x509.load_der_x509_certificate(data)
            except ValueError as e:
                logging.warning(f"Skipping unreadable certificate {path.name}: {e}")

    def _load_system_store(self) -> Iterable[x509.Certificate]:
        try:
            entries = ssl.enum_certificates("MY")
        except (AttributeError, OSError) as e:
            logging.warning(f"Could not read CurrentUser\\My certificate store: {e}")
            return

        for cert_bytes, encoding, _trust in entries:
            if encoding != "x509_asn":
                continue
            try:
                yield x509.load_der_x509_certificate(cert_bytes)
            except ValueError as e:
                logging.debug(f"Skipping unreadable store certificate: {e}")

    @staticmethod
    def _subject_matches(cert: x509.Certificate, subject: Optional[str]) -> bool:
        if not subject:
            return True
        return subject.lower() in cert.subject.rfc4514_string().lower()

    @staticmethod
    def _allows_encryption(cert: x509.Certificate) -> bool:
        try:
            key_usage = cert.extensions.get_extension_for_class(x509.KeyUsage).value
            if not key_usage.key_encipherment:
                return False
        except x509.ExtensionNotFound:
            pass

        try:
            extended = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        except x509.ExtensionNotFound:
            return True
        return DOCUMENT_ENCRYPTION_OID in extended
