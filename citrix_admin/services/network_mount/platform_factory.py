"""Platform Factory - SRP compliant platform detection and binder creation."""

import logging
import platform
from typing import Optional

from .base_binder import BaseResourceBinder
from .command_runner import CommandRunner
from .namespace_refresher import ExplorerRefresher, NamespaceRefresher, NullRefresher
from ...core.exceptions import UnsupportedPlatformError


class PlatformFactory:
    """Factory for platform-specific binders and refreshers. SRP: Platform detection/creation ONLY."""

    def detect_platform(self) -> str:
        """Detect current platform. Returns: macos, windows, or linux."""
        system = platform.system().lower()

        if system == "darwin":
            return "macos"
        elif system == "windows":
            return "windows"
        elif system == "linux":
            return "linux"
        else:
            raise UnsupportedPlatformError(f"Platform {system} not supported for drive mapping")

    def create_binder(
        self, runner: Optional[CommandRunner] = None, default_domain: str = ""
    ) -> BaseResourceBinder:
        """Create platform-specific binder instance."""
        platform_name = self.detect_platform()

        if platform_name == "windows":
            from .windows_binder import WindowsShareBinder
            return WindowsShareBinder(runner=runner, default_domain=default_domain)

        raise UnsupportedPlatformError(f"No drive mapping implementation for platform: {platform_name}")

    def create_refresher(self, enabled: bool, runner: Optional[CommandRunner] = None) -> NamespaceRefresher:
        if enabled and self.detect_platform() == "windows":
            return ExplorerRefresher(runner=runner)
        logging.debug("Shell refresh disabled or not supported on this platform")
        return NullRefresher()
