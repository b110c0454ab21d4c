"""Drive Mapping Service - SRP compliant orchestrator."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .base_binder import BaseResourceBinder
from .command_runner import CommandRunner
from .credential_prompt import ConsoleCredentialPrompt, CredentialPrompt, TkCredentialPrompt
from .mapping_registrar import MappingRegistrar
from .namespace_refresher import NamespaceRefresher
from .platform_factory import PlatformFactory
from .retry_controller import RetryController
from ...config import Settings
from ...models import AttemptResult


@dataclass
class DriveMappingOutcome:
    cancelled: bool = False
    results: List[AttemptResult] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.cancelled and all(result.success for result in self.results)

    @property
    def failed(self) -> List[AttemptResult]:
        return [result for result in self.results if not result.success]


class DriveMappingService:
    """Authenticate once, then map every configured drive. SRP: Mapping orchestration ONLY."""

    def __init__(
        self,
        settings: Settings,
        prompt: Optional[CredentialPrompt] = None,
        binder: Optional[BaseResourceBinder] = None,
        refresher: Optional[NamespaceRefresher] = None,
    ):
        self._settings = settings
        factory = PlatformFactory()
        runner = CommandRunner(timeout_seconds=settings.command_timeout_seconds)

        self._prompt = prompt or self._create_prompt(settings)
        self._binder = binder or factory.create_binder(runner=runner, default_domain=settings.default_domain)
        self._refresher = refresher or factory.create_refresher(settings.refresh_shell, runner=runner)

        self.controller = RetryController(self._prompt, self._binder, settings.max_auth_attempts)
        self.registrar = MappingRegistrar(self._binder, self._refresher)
        logging.info(f"Initialized {self._binder.get_platform_name()} drive mapper")

    @staticmethod
    def _create_prompt(settings: Settings) -> CredentialPrompt:
        if settings.prompt_mode == "gui":
            return TkCredentialPrompt()
        return ConsoleCredentialPrompt()

    async def map_drives(self) -> DriveMappingOutcome:
        """
        Raises:
            ValueError: If no drive mappings are configured.
            AuthenticationFailure: If the attempt limit is reached.
        """
        targets = self._settings.drive_mappings
        if not targets:
            raise ValueError("No drive mappings configured (DRIVE_MAPPINGS)")

        logging.info(f"Mapping {len(targets)} drive(s): {', '.join(t.drive for t in targets)}")
        credential = await self.controller.authenticate(targets)
        if credential is None:
            return DriveMappingOutcome(cancelled=True)

        results = await self.registrar.register_all(targets, credential)
        for result in results:
            if not result.success:
                self._prompt.show_error(f"{result.target.drive} could not be mapped: {result.message}")
        return DriveMappingOutcome(results=results)
