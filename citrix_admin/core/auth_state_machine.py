import logging
from typing import Dict, Set

from citrix_admin.core.exceptions import InvalidTransitionError
from citrix_admin.models import AuthState


class AuthStateMachine:
    """
    Dørmand for credential-loopets tilstande.

    Kun denne klasse må ændre state, og kun langs de lovlige overgange.
    Authenticated og Cancelled er terminale.
    """

    def __init__(self):
        self._state = AuthState.AWAITING_CREDENTIAL

        # Definerer alle lovlige overgange
        self._transitions: Dict[AuthState, Set[AuthState]] = {
            AuthState.AWAITING_CREDENTIAL: {
                AuthState.VERIFYING,
                AuthState.CANCELLED,
            },
            AuthState.VERIFYING: {
                AuthState.AUTHENTICATED,
                AuthState.AWAITING_CREDENTIAL,  # Forkert password, spørg igen
            },
            AuthState.AUTHENTICATED: set(),
            AuthState.CANCELLED: set(),
        }

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return not self._transitions[self._state]

    def transition(self, new_state: AuthState) -> AuthState:
        """
        Flytter til new_state.

        Raises:
            InvalidTransitionError: Hvis overgangen ikke er tilladt.
        """
        old_state = self._state
        if new_state not in self._transitions[old_state]:
            raise InvalidTransitionError(old_state.value, new_state.value)

        logging.debug(f"Auth transition: {old_state.value} -> {new_state.value}")
        self._state = new_state
        return new_state
