from functools import lru_cache

from .config import Settings
from .services.network_mount import DriveMappingService
from .services.profile_cleanup import (
    ArchivedUserDirectory,
    ProfileCleanupService,
    ProfileFolderScanner,
    create_ldap_connection,
)
from .services.secrets import CertificateStore, CmsCipher, CredentialVault
from .utils.log_viewer import LogViewer


@lru_cache
def get_settings() -> Settings:
    """Hent Settings singleton instance."""
    return Settings()


def get_credential_vault(settings: Settings) -> CredentialVault:
    return CredentialVault(settings.vault_service_name)


def get_certificate_store(settings: Settings) -> CertificateStore:
    return CertificateStore(settings.certificate_directory)


def get_cms_cipher() -> CmsCipher:
    return CmsCipher()


def get_log_viewer(settings: Settings) -> LogViewer:
    return LogViewer(settings)


def get_drive_mapping_service(settings: Settings) -> DriveMappingService:
    return DriveMappingService(settings)


def get_profile_cleanup_service(settings: Settings) -> ProfileCleanupService:
    vault = get_credential_vault(settings)

    def connect():
        # Bind password lives in the vault so it never sits in settings.env
        credential = vault.get_credential(settings.ldap_vault_entry)
        if settings.ldap_bind_user:
            credential = credential.model_copy(update={"username": settings.ldap_bind_user})
        return create_ldap_connection(settings, credential)

    directory = ArchivedUserDirectory(
        search_base=settings.ldap_search_base,
        connection_factory=connect,
        only_disabled=settings.ldap_archived_only_disabled,
    )
    scanner = ProfileFolderScanner(settings.profile_folder_suffixes)
    return ProfileCleanupService(directory, scanner, settings.profile_roots)
