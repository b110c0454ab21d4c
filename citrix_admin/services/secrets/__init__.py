from .certificate_store import CertificateStore
from .cms_cipher import CmsCipher
from .credential_vault import CredentialVault

__all__ = ["CertificateStore", "CmsCipher", "CredentialVault"]
