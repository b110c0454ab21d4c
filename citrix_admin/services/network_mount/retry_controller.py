"""Retry Controller - credential loop until verified, cancelled or out of attempts."""

import logging
from typing import Optional, Sequence

from .base_binder import BaseResourceBinder
from .credential_prompt import CredentialPrompt
from ...core.auth_state_machine import AuthStateMachine
from ...core.exceptions import AuthenticationFailure
from ...models import AuthState, Credential, MappingTarget


class RetryController:
    """Orchestrates prompt and verification. SRP: Authentication loop ONLY."""

    def __init__(
        self,
        prompt: CredentialPrompt,
        binder: BaseResourceBinder,
        max_attempts: int = 5,
    ):
        self._prompt = prompt
        self._binder = binder
        self._max_attempts = max_attempts
        self._state_machine = AuthStateMachine()
        self.attempts = 0

    @property
    def state(self) -> AuthState:
        return self._state_machine.state

    async def authenticate(self, targets: Sequence[MappingTarget]) -> Optional[Credential]:
        """
        Ask for credentials until they are accepted by the first target.

        Returns:
            The verified credential, or None if the operator cancelled.

        Raises:
            ValueError: If targets is empty.
            AuthenticationFailure: If max_attempts credentials were rejected.
        """
        if not targets:
            raise ValueError("At least one mapping target is required to verify credentials")

        probe_target = targets[0]
        self._state_machine = AuthStateMachine()
        self.attempts = 0

        while True:
            credential = self._prompt.collect()
            if credential is None:
                self._state_machine.transition(AuthState.CANCELLED)
                logging.info("Credential prompt cancelled by operator")
                return None

            self._state_machine.transition(AuthState.VERIFYING)
            self.attempts += 1
            logging.info(f"Verification attempt {self.attempts} for {credential.username or '<empty>'}")

            # Stale sessions to the same server make net use fail with 1219
            await self._binder.release(probe_target)
            last_result = await self._binder.verify(probe_target, credential)

            if last_result.success:
                self._state_machine.transition(AuthState.AUTHENTICATED)
                logging.info(f"Authenticated as {credential.username}")
                return credential

            self._state_machine.transition(AuthState.AWAITING_CREDENTIAL)
            logging.warning(f"Authentication failed ({last_result.code}): {last_result.message}")
            failure = f"Login failed (error {last_result.code}): {last_result.message}."

            if self._max_attempts > 0 and self.attempts >= self._max_attempts:
                logging.error(f"Giving up after {self.attempts} rejected credential attempt(s)")
                self._prompt.show_error(f"{failure} No attempts left.")
                raise AuthenticationFailure(self.attempts, last_result.code, last_result.message)

            self._prompt.show_error(f"{failure} Please try again.")
