from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class AuthState(str, Enum):
    """
    Tilstande for credential-loopet i RetryController.

    Normal Workflow: AwaitingCredential -> Verifying -> Authenticated
    Retry: Verifying -> AwaitingCredential (forkert password)
    Alternative: AwaitingCredential -> Cancelled (bruger trykker Cancel)
    """

    AWAITING_CREDENTIAL = "AwaitingCredential"  # Venter på brugernavn/password
    VERIFYING = "Verifying"  # Probe mod første share er i gang
    AUTHENTICATED = "Authenticated"  # Credential er verificeret (terminal)
    CANCELLED = "Cancelled"  # Bruger har annulleret (terminal)


class Credential(BaseModel):
    """Username/secret pair collected for a single authentication attempt."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(default="", description="Account name, optionally DOMAIN\\user")
    secret: SecretStr = Field(default=SecretStr(""), description="Password, never logged")

    def qualified_username(self, default_domain: str = "") -> str:
        """Prefix the configured domain when the user name carries none."""
        if not default_domain or "\\" in self.username or "@" in self.username:
            return self.username
        return f"{default_domain}\\{self.username}"


class MappingTarget(BaseModel):
    """
    En statisk konfigureret drevmapping: drevbogstav -> UNC sti.
    """

    model_config = ConfigDict(frozen=True)

    alias: str = Field(..., description="Drevbogstav, f.eks. 'T'")
    remote_path: str = Field(..., description="UNC sti, f.eks. \\\\srv\\data")

    @field_validator("alias")
    @classmethod
    def _normalize_alias(cls, value: str) -> str:
        letter = value.strip().rstrip(":").upper()
        if len(letter) != 1 or not ("A" <= letter <= "Z"):
            raise ValueError(f"Drive alias must be a single letter A-Z, got {value!r}")
        return letter

    @field_validator("remote_path")
    @classmethod
    def _normalize_remote_path(cls, value: str) -> str:
        path = value.strip()
        if path.startswith("smb://"):
            path = "\\\\" + path[6:]
        path = path.replace("/", "\\").rstrip("\\")
        if not path.startswith("\\\\") or len(path) <= 2:
            raise ValueError(f"Remote path must be a UNC path, got {value!r}")
        return path

    @property
    def drive(self) -> str:
        return f"{self.alias}:"


class AttemptResult(BaseModel):
    """Outcome of one verify or bind call. code is 0 exactly when success is True."""

    success: bool
    code: int = 0
    message: str = ""
    target: Optional[MappingTarget] = None

    @classmethod
    def ok(cls, message: str, target: Optional[MappingTarget] = None) -> "AttemptResult":
        return cls(success=True, code=0, message=message, target=target)

    @classmethod
    def failed(
        cls, code: int, message: str, target: Optional[MappingTarget] = None
    ) -> "AttemptResult":
        # A failure must never carry the success code
        return cls(success=False, code=code or -1, message=message, target=target)


class ArchivedUser(BaseModel):
    """AD account found under the archive search base."""

    sam_account_name: str
    distinguished_name: str = ""
    disabled: bool = True


class ProfileFolder(BaseModel):
    user: ArchivedUser
    path: str
    size_bytes: int = Field(default=0, ge=0)

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


class CleanupPlan(BaseModel):
    """Folders scheduled for deletion plus the summed size."""

    folders: list[ProfileFolder] = Field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(folder.size_bytes for folder in self.folders)

    @property
    def total_gb(self) -> float:
        return self.total_bytes / (1024**3)

    @property
    def is_empty(self) -> bool:
        return not self.folders


class CleanupResult(BaseModel):
    path: str
    deleted: bool
    freed_bytes: int = 0
    error: Optional[str] = None
