"""
Pytest configuration og shared fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Sequence, Set, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from pydantic import SecretStr

from citrix_admin.config import Settings
from citrix_admin.dependencies import get_settings
from citrix_admin.models import Credential, MappingTarget
from citrix_admin.services.network_mount.command_runner import CommandResult


def _system_error(code: int) -> CommandResult:
    return CommandResult(returncode=2, stderr=f"System error {code} has occurred.\n")


class FakeNetUse:
    """
    In-memory stand-in for net.exe.

    Keeps the drive letter table and deviceless sessions like Windows does,
    so tests can check what is mapped after a sequence of calls.
    """

    def __init__(self, accepted: Tuple[str, str] = ("alice", "s3cret")):
        self.accepted = accepted
        self.drives: Dict[str, str] = {}
        self.sessions: Set[str] = set()
        self.unreachable: Set[str] = set()
        self.busy_drives: Set[str] = set()
        self.calls: List[List[str]] = []
        self.redactions: List[Sequence[str]] = []

    async def run(self, args: Sequence[str], redacted: Sequence[str] = ()) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        self.redactions.append(list(redacted))
        assert args[:2] == ["net", "use"]
        rest = args[2:]

        if "/delete" in rest:
            return self._delete(rest[0])
        if len(rest) == 1:
            return CommandResult(0, stdout=f"Local name {rest[0]}\n") if rest[0] in self.drives else _system_error(2250)
        return self._connect(rest)

    def _delete(self, name: str) -> CommandResult:
        if name.endswith(":"):
            if name in self.busy_drives:
                return _system_error(2404)
            if self.drives.pop(name, None) is None:
                return _system_error(2250)
            return CommandResult(0, stdout=f"{name} was deleted successfully.\n")
        if name not in self.sessions:
            return _system_error(2250)
        self.sessions.discard(name)
        return CommandResult(0, stdout=f"{name} was deleted successfully.\n")

    def _connect(self, rest: List[str]) -> CommandResult:
        drive = rest.pop(0) if rest[0].endswith(":") else None
        path, secret = rest[0], rest[1]
        user = next(arg.split(":", 1)[1] for arg in rest if arg.startswith("/user:"))

        if path in self.unreachable:
            return _system_error(53)
        if (user, secret) != self.accepted:
            return _system_error(1326)
        if drive:
            if drive in self.drives:
                return _system_error(85)
            self.drives[drive] = path
        else:
            self.sessions.add(path)
        return CommandResult(0, stdout="The command completed successfully.\n")

    def count(self, predicate) -> int:
        return sum(1 for call in self.calls if predicate(call))


@pytest.fixture(autouse=True)
def clean_settings_cache():
    """Automatically reset cached settings before hver test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_net() -> FakeNetUse:
    return FakeNetUse()


@pytest.fixture
def good_credential() -> Credential:
    return Credential(username="alice", secret=SecretStr("s3cret"))


@pytest.fixture
def bad_credential() -> Credential:
    return Credential(username="alice", secret=SecretStr("wrong"))


@pytest.fixture
def targets() -> List[MappingTarget]:
    return [
        MappingTarget(alias="T", remote_path=r"\\srv\data"),
        MappingTarget(alias="H", remote_path=r"\\srv\home"),
    ]


@pytest.fixture
def settings(tmp_path, targets) -> Settings:
    return Settings(
        _env_file=None,
        log_directory=str(tmp_path / "logs"),
        drive_mappings=targets,
        max_auth_attempts=5,
        refresh_shell=False,
    )


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def make_certificate(rsa_key):
    """Factory for self-signed test certificates with configurable usage and validity."""

    def _make(
        common_name: str = "Citrix Secrets",
        days_valid: int = 365,
        not_before_days: int = -1,
        key_encipherment: bool = True,
        extended_usage: Sequence[str] = ("1.3.6.1.4.1.311.80.1",),
    ) -> x509.Certificate:
        now = datetime.now(timezone.utc)
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
        builder = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(rsa_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now + timedelta(days=not_before_days))
            .not_valid_after(now + timedelta(days=days_valid))
            .add_extension(
                x509.KeyUsage(
                    digital_signature=False,
                    content_commitment=False,
                    key_encipherment=key_encipherment,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=False,
            )
        )
        if extended_usage:
            builder = builder.add_extension(
                x509.ExtendedKeyUsage([x509.ObjectIdentifier(oid) for oid in extended_usage]),
                critical=False,
            )
        return builder.sign(rsa_key, hashes.SHA256())

    return _make
