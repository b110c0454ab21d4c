import logging

import pytest

from citrix_admin.core.auth_state_machine import AuthStateMachine
from citrix_admin.core.exceptions import InvalidTransitionError
from citrix_admin.models import AuthState

# Slå logning fra under tests for at holde output rent
logging.disable(logging.CRITICAL)


@pytest.fixture
def state_machine() -> AuthStateMachine:
    return AuthStateMachine()


def test_starts_awaiting_credential(state_machine: AuthStateMachine):
    assert state_machine.state == AuthState.AWAITING_CREDENTIAL
    assert not state_machine.is_terminal


def test_happy_path(state_machine: AuthStateMachine):
    """AwaitingCredential -> Verifying -> Authenticated."""
    state_machine.transition(AuthState.VERIFYING)
    state_machine.transition(AuthState.AUTHENTICATED)

    assert state_machine.state == AuthState.AUTHENTICATED
    assert state_machine.is_terminal


def test_failed_verification_loops_back(state_machine: AuthStateMachine):
    state_machine.transition(AuthState.VERIFYING)
    state_machine.transition(AuthState.AWAITING_CREDENTIAL)
    state_machine.transition(AuthState.VERIFYING)

    assert state_machine.state == AuthState.VERIFYING


def test_cancel_from_awaiting(state_machine: AuthStateMachine):
    state_machine.transition(AuthState.CANCELLED)
    assert state_machine.is_terminal


def test_cannot_cancel_while_verifying(state_machine: AuthStateMachine):
    """Cancellation is only checked at the prompt."""
    state_machine.transition(AuthState.VERIFYING)

    with pytest.raises(InvalidTransitionError) as e:
        state_machine.transition(AuthState.CANCELLED)

    assert "Verifying" in str(e.value)
    assert "Cancelled" in str(e.value)
    assert state_machine.state == AuthState.VERIFYING


@pytest.mark.parametrize("terminal", [AuthState.AUTHENTICATED, AuthState.CANCELLED])
def test_terminal_states_reject_everything(terminal: AuthState):
    state_machine = AuthStateMachine()
    if terminal == AuthState.AUTHENTICATED:
        state_machine.transition(AuthState.VERIFYING)
    state_machine.transition(terminal)

    for target in AuthState:
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(target)


def test_cannot_skip_verification(state_machine: AuthStateMachine):
    with pytest.raises(InvalidTransitionError):
        state_machine.transition(AuthState.AUTHENTICATED)
