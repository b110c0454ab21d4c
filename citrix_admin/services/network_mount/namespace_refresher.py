"""Namespace refresh after drive mapping - makes new drive letters visible in the shell."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .command_runner import CommandRunner


class NamespaceRefresher(ABC):
    @abstractmethod
    async def refresh(self) -> bool:
        """Ask the shell to re-enumerate drives. Returns True if a refresh happened."""
        pass


class NullRefresher(NamespaceRefresher):
    async def refresh(self) -> bool:
        return False


class ExplorerRefresher(NamespaceRefresher):
    """Restarts explorer.exe so Explorer picks up drives mapped from another session."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        launcher: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self._runner = runner or CommandRunner()
        self._launcher = launcher

    async def refresh(self) -> bool:
        logging.info("Restarting explorer.exe to refresh mapped drives")
        stopped = await self._runner.run(["taskkill", "/f", "/im", "explorer.exe"])
        if stopped.returncode != 0:
            logging.warning(f"taskkill explorer.exe returned {stopped.returncode}: {stopped.output}")

        try:
            # explorer.exe keeps running as the shell, so it is started detached
            self._launcher(["explorer.exe"])
        except OSError as e:
            logging.error(f"Could not restart explorer.exe: {e}")
            return False
        return True
