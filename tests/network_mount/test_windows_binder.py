"""
Tests for WindowsShareBinder.

Runs against FakeNetUse (conftest) which keeps a drive table like net.exe,
so idempotent remapping can be checked on the resulting state.
"""

import logging

import pytest
from pydantic import SecretStr

from citrix_admin.core.exceptions import BindFailure
from citrix_admin.models import Credential, MappingTarget
from citrix_admin.services.network_mount.command_runner import CommandResult
from citrix_admin.services.network_mount.windows_binder import WindowsShareBinder

logging.disable(logging.CRITICAL)


@pytest.fixture
def binder(fake_net) -> WindowsShareBinder:
    return WindowsShareBinder(runner=fake_net)


class TestVerify:
    @pytest.mark.asyncio
    async def test_verify_success_leaves_no_session(self, binder, fake_net, targets, good_credential):
        result = await binder.verify(targets[0], good_credential)

        assert result.success
        assert result.code == 0
        assert fake_net.sessions == set()
        assert fake_net.drives == {}

    @pytest.mark.asyncio
    async def test_verify_bad_password_returns_system_error(self, binder, fake_net, targets, bad_credential):
        result = await binder.verify(targets[0], bad_credential)

        assert not result.success
        assert result.code == 1326
        assert "bad password" in result.message
        assert result.target == targets[0]

    @pytest.mark.asyncio
    async def test_verify_unreachable_path(self, binder, fake_net, targets, good_credential):
        fake_net.unreachable.add(targets[0].remote_path)

        result = await binder.verify(targets[0], good_credential)

        assert not result.success
        assert result.code == 53

    @pytest.mark.asyncio
    async def test_secret_is_marked_for_redaction(self, binder, fake_net, targets, good_credential):
        await binder.verify(targets[0], good_credential)

        assert ["s3cret"] in fake_net.redactions

    @pytest.mark.asyncio
    async def test_default_domain_is_prefixed(self, fake_net, targets, good_credential):
        fake_net.accepted = ("CORP\\alice", "s3cret")
        binder = WindowsShareBinder(runner=fake_net, default_domain="CORP")

        result = await binder.verify(targets[0], good_credential)

        assert result.success
        assert "/user:CORP\\alice" in fake_net.calls[0]


class TestBind:
    @pytest.mark.asyncio
    async def test_bind_maps_drive_persistently(self, binder, fake_net, targets, good_credential):
        result = await binder.bind(targets[0], good_credential)

        assert result.success
        assert fake_net.drives == {"T:": r"\\srv\data"}
        assert "/persistent:yes" in fake_net.calls[-1]

    @pytest.mark.asyncio
    async def test_rebind_same_alias_points_to_second_target(self, binder, fake_net, good_credential):
        first = MappingTarget(alias="T", remote_path=r"\\srv\data")
        second = MappingTarget(alias="T", remote_path=r"\\srv\archive")

        first_result = await binder.bind(first, good_credential)
        second_result = await binder.bind(second, good_credential)

        assert first_result.success
        assert second_result.success
        assert fake_net.drives == {"T:": r"\\srv\archive"}

    @pytest.mark.asyncio
    async def test_bind_failure_reports_code(self, binder, fake_net, targets, good_credential):
        fake_net.unreachable.add(targets[1].remote_path)

        result = await binder.bind(targets[1], good_credential)

        assert not result.success
        assert result.code == 53
        assert "H:" not in fake_net.drives

    @pytest.mark.asyncio
    async def test_busy_drive_raises_bind_failure(self, binder, fake_net, targets, good_credential):
        fake_net.drives["T:"] = r"\\old\share"
        fake_net.busy_drives.add("T:")

        with pytest.raises(BindFailure) as e:
            await binder.bind(targets[0], good_credential)

        assert e.value.code == 2404
        assert fake_net.drives == {"T:": r"\\old\share"}


class TestRelease:
    @pytest.mark.asyncio
    async def test_release_removes_session_and_drive(self, binder, fake_net, targets):
        fake_net.sessions.add(targets[0].remote_path)
        fake_net.drives["T:"] = targets[0].remote_path

        await binder.release(targets[0])

        assert fake_net.sessions == set()
        assert fake_net.drives == {}

    @pytest.mark.asyncio
    async def test_release_without_anything_to_release(self, binder, fake_net, targets):
        await binder.release(targets[0])

        assert fake_net.drives == {}


class TestErrorCodes:
    def test_localized_system_error(self, binder):
        result = CommandResult(returncode=2, stdout="Systemfejl 86 er opstået.\n")
        assert binder._error_code(result) == 86

        result = CommandResult(returncode=2, stdout="Systemfehler 86 aufgetreten.")
        assert binder._error_code(result) == 86

    def test_no_system_error_falls_back_to_returncode(self, binder):
        result = CommandResult(returncode=2, stdout="Something unexpected")
        assert binder._error_code(result) == 2

    def test_timeout_maps_to_minus_one(self, binder):
        assert binder._error_code(CommandResult(returncode=-1, timed_out=True)) == -1

    def test_unknown_code_uses_command_output(self, binder):
        result = CommandResult(returncode=2, stderr="System error 1222 has occurred.")
        assert binder._describe(1222, result) == "System error 1222 has occurred."

    def test_empty_credential_is_passed_through(self, binder, fake_net, targets):
        empty = Credential(username="", secret=SecretStr(""))
        args = binder._connect_args(None, targets[0], empty, persistent=False)

        assert args == ["net", "use", r"\\srv\data", "", "/user:", "/persistent:no"]
