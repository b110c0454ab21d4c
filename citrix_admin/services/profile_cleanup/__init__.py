from .archived_user_directory import ArchivedUserDirectory, create_ldap_connection
from .profile_cleanup_service import ProfileCleanupService
from .profile_folder_scanner import ProfileFolderScanner, calculate_folder_size

__all__ = [
    "ArchivedUserDirectory",
    "create_ldap_connection",
    "ProfileCleanupService",
    "ProfileFolderScanner",
    "calculate_folder_size",
]
