"""Abstract Base Binder - SRP compliant interface definition."""

from abc import ABC, abstractmethod

from ...models import AttemptResult, Credential, MappingTarget


class BaseResourceBinder(ABC):
    """Abstract base class for platform-specific share binding."""

    @abstractmethod
    async def verify(self, target: MappingTarget, credential: Credential) -> AttemptResult:
        """Connect to target and disconnect again. Leaves no binding behind."""
        pass

    @abstractmethod
    async def bind(
        self, target: MappingTarget, credential: Credential, persistent: bool = True
    ) -> AttemptResult:
        """Bind target.alias to target.remote_path, unbinding the alias first if taken."""
        pass

    @abstractmethod
    async def release(self, target: MappingTarget) -> None:
        """Drop any session or alias left over for target. Never raises."""
        pass

    @abstractmethod
    def get_platform_name(self) -> str:
        """Get platform name for logging."""
        pass
