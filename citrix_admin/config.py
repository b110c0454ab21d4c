from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import MappingTarget


class Settings(BaseSettings):
    # Logging konfiguration
    log_level: str = "INFO"
    log_directory: str = "logs"
    log_retention_days: int = 30
    log_viewer_path: str = ""  # e.g. C:\Tools\CMTrace.exe, empty = platform default

    # Drive mapper
    drive_mappings: list[MappingTarget] = Field(default_factory=list)
    max_auth_attempts: int = 5  # 0 = keep asking until success or cancel
    command_timeout_seconds: float = 30.0
    prompt_mode: Literal["console", "gui"] = "console"
    refresh_shell: bool = True  # Restart explorer after mapping so new drives show up
    default_domain: str = ""  # Prepended as DOMAIN\user when the user types no domain

    # Certificates, CMS and credential vault
    certificate_directory: str = ""
    certificate_subject: str = ""
    private_key_path: str = ""
    vault_service_name: str = "citrix-admin"

    # Active Directory profile cleanup
    ldap_server: str = ""
    ldap_use_ssl: bool = False
    ldap_bind_user: str = ""
    ldap_vault_entry: str = "ldap"  # Vault entry holding the bind password
    ldap_search_base: str = ""
    ldap_archived_only_disabled: bool = True
    profile_roots: list[str] = Field(default_factory=list)
    profile_folder_suffixes: list[str] = Field(default_factory=lambda: ["", ".V2", ".V6"])

    model_config = SettingsConfigDict(
        env_file="settings.env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def log_path(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_directory)

    def log_file_for(self, script_name: str) -> Path:
        return self.log_path / f"{script_name}.log"
