import asyncio
import io
import logging
import signal
from unittest.mock import patch

from rich.console import Console

from citrix_admin.services.network_mount.credential_prompt import ConsoleCredentialPrompt

logging.disable(logging.CRITICAL)

ASK = "citrix_admin.services.network_mount.credential_prompt.Prompt.ask"


def _prompt(**kwargs) -> ConsoleCredentialPrompt:
    return ConsoleCredentialPrompt(console=Console(file=io.StringIO()), **kwargs)


def test_collect_returns_credential():
    with patch(ASK, side_effect=["  alice ", "s3cret"]):
        credential = _prompt().collect()

    assert credential.username == "alice"
    assert credential.secret.get_secret_value() == "s3cret"


def test_empty_answers_are_a_credential_not_a_cancel():
    with patch(ASK, side_effect=["", ""]):
        credential = _prompt().collect()

    assert credential is not None
    assert credential.username == ""
    assert credential.secret.get_secret_value() == ""


def test_cancel_word_cancels_without_asking_password():
    with patch(ASK, side_effect=[":q"]) as ask:
        assert _prompt().collect() is None

    assert ask.call_count == 1


def test_ctrl_c_cancels():
    with patch(ASK, side_effect=KeyboardInterrupt):
        assert _prompt().collect() is None


def test_eof_cancels():
    with patch(ASK, side_effect=["alice", EOFError()]):
        assert _prompt().collect() is None


def test_default_username_is_offered():
    with patch(ASK, side_effect=["bob", "pw"]) as ask:
        _prompt(default_username="bob").collect()

    assert ask.call_args_list[0].kwargs["default"] == "bob"
    assert ask.call_args_list[1].kwargs["password"] is True


def test_no_default_when_none_configured():
    with patch(ASK, side_effect=["bob", "pw"]) as ask:
        _prompt().collect()

    assert "default" not in ask.call_args_list[0].kwargs


def test_show_error_prints_message():
    console = Console(record=True, width=120)
    ConsoleCredentialPrompt(console=console).show_error("Login failed (error 1326)")

    assert "Login failed (error 1326)" in console.export_text()


def _interrupted_input(*args, **kwargs):
    # Ctrl+C while the operator is typing the user name
    if "password" not in kwargs:
        signal.raise_signal(signal.SIGINT)
        return "alice"
    return "pw"


def test_ctrl_c_cancels_inside_event_loop():
    """asyncio.run() owns SIGINT; the prompt must still see Ctrl+C as cancel."""

    async def main():
        credential = _prompt().collect()
        try:
            await asyncio.sleep(0)
        except asyncio.CancelledError:
            return "main task cancelled"
        return credential

    with patch(ASK, side_effect=_interrupted_input):
        assert asyncio.run(main()) is None


def test_sigint_handler_is_restored_after_prompt():
    before = signal.getsignal(signal.SIGINT)

    with patch(ASK, side_effect=["alice", "pw"]):
        _prompt().collect()

    assert signal.getsignal(signal.SIGINT) is before
