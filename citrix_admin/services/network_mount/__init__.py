"""
Network Mount Module - credential loop and drive mapping.

Components:
- DriveMappingService: Main orchestrator
- RetryController: Prompt -> verify loop with attempt limit
- MappingRegistrar: Maps every configured drive with the verified credential
- BaseResourceBinder / WindowsShareBinder: net use session handling
- CredentialPrompt: Console and dialog front ends
- PlatformFactory: Platform detection and factory
"""

from .base_binder import BaseResourceBinder
from .command_runner import CommandResult, CommandRunner
from .credential_prompt import ConsoleCredentialPrompt, CredentialPrompt, TkCredentialPrompt
from .drive_mapping_service import DriveMappingOutcome, DriveMappingService
from .mapping_registrar import MappingRegistrar
from .namespace_refresher import ExplorerRefresher, NamespaceRefresher, NullRefresher
from .platform_factory import PlatformFactory
from .retry_controller import RetryController

__all__ = [
    "BaseResourceBinder",
    "CommandResult",
    "CommandRunner",
    "ConsoleCredentialPrompt",
    "CredentialPrompt",
    "TkCredentialPrompt",
    "DriveMappingOutcome",
    "DriveMappingService",
    "MappingRegistrar",
    "ExplorerRefresher",
    "NamespaceRefresher",
    "NullRefresher",
    "PlatformFactory",
    "RetryController",
]
