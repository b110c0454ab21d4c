"""Windows Share Binder - SRP compliant."""

import logging
import re
from typing import List, Optional

from .base_binder import BaseResourceBinder
from .command_runner import CommandResult, CommandRunner
from ...core.exceptions import BindFailure
from ...models import AttemptResult, Credential, MappingTarget


class WindowsShareBinder(BaseResourceBinder):
    """Windows drive mapping via net use. SRP: Windows share sessions ONLY."""

    # "System error 86 has occurred." (plus the Danish/German wording on localized hosts)
    SYSTEM_ERROR_PATTERN = re.compile(r"(?:system error|systemfejl|systemfehler)\s+(\d+)", re.IGNORECASE)

    KNOWN_ERRORS = {
        5: "Access is denied",
        53: "The network path was not found",
        67: "The network name cannot be found",
        85: "The local device name is already in use",
        86: "The specified network password is not correct",
        1219: "Multiple connections to a server by the same user are not allowed",
        1326: "Unknown user name or bad password",
        1909: "The referenced account is currently locked out",
        2250: "The network connection could not be found",
        2404: "The device is being accessed by an active process",
    }

    def __init__(self, runner: Optional[CommandRunner] = None, default_domain: str = ""):
        self._runner = runner or CommandRunner()
        self._default_domain = default_domain

    async def verify(self, target: MappingTarget, credential: Credential) -> AttemptResult:
        """Probe credentials with a deviceless connection that is removed right after."""
        logging.info(f"Verifying credentials for {credential.username} against {target.remote_path}")

        result = await self._net_use(self._connect_args(None, target, credential, persistent=False), credential)
        if result.returncode != 0:
            attempt = self._failure(result, target)
            logging.warning(f"Verification failed for {target.remote_path}: {attempt.code} {attempt.message}")
            return attempt

        disconnect = await self._net_use(["net", "use", target.remote_path, "/delete", "/y"])
        if disconnect.returncode != 0:
            # Credentials are fine, the leftover session is cleaned up on the next release()
            logging.warning(f"Probe session to {target.remote_path} not removed: {disconnect.output}")

        logging.info(f"Credentials verified against {target.remote_path}")
        return AttemptResult.ok(f"Credentials accepted by {target.remote_path}", target)

    async def bind(
        self, target: MappingTarget, credential: Credential, persistent: bool = True
    ) -> AttemptResult:
        """Map target.drive to target.remote_path, replacing an existing mapping of that letter."""
        if await self.is_bound(target.drive):
            logging.info(f"{target.drive} already mapped, removing before remap")
            removed = await self._net_use(["net", "use", target.drive, "/delete", "/y"])
            if removed.returncode != 0:
                code = self._error_code(removed)
                raise BindFailure(target.alias, target.remote_path, code, self._describe(code, removed))

        logging.info(f"Mapping {target.drive} -> {target.remote_path} (persistent={persistent})")
        result = await self._net_use(self._connect_args(target.drive, target, credential, persistent), credential)

        if result.returncode != 0:
            attempt = self._failure(result, target)
            logging.error(f"Mapping {target.drive} failed: {attempt.code} {attempt.message}")
            return attempt

        logging.info(f"Successfully mapped {target.drive} to {target.remote_path}")
        return AttemptResult.ok(f"{target.drive} mapped to {target.remote_path}", target)

    async def release(self, target: MappingTarget) -> None:
        """Remove sessions to the remote path and the drive letter. Missing ones are ignored."""
        await self._net_use(["net", "use", target.remote_path, "/delete", "/y"])
        if await self.is_bound(target.drive):
            await self._net_use(["net", "use", target.drive, "/delete", "/y"])
        logging.debug(f"Released stale connections for {target.drive} / {target.remote_path}")

    async def is_bound(self, drive: str) -> bool:
        result = await self._net_use(["net", "use", drive])
        return result.returncode == 0

    def get_platform_name(self) -> str:
        """Get platform name for logging."""
        return "Windows"

    def _connect_args(
        self, drive: Optional[str], target: MappingTarget, credential: Credential, persistent: bool
    ) -> List[str]:
        args = ["net", "use"]
        if drive:
            args.append(drive)
        args += [
            target.remote_path,
            credential.secret.get_secret_value(),
            f"/user:{credential.qualified_username(self._default_domain)}",
            f"/persistent:{'yes' if persistent else 'no'}",
        ]
        return args

    async def _net_use(self, args: List[str], credential: Optional[Credential] = None) -> CommandResult:
        redacted = [credential.secret.get_secret_value()] if credential else []
        return await self._runner.run(args, redacted=redacted)

    def _error_code(self, result: CommandResult) -> int:
        if result.timed_out:
            return -1
        match = self.SYSTEM_ERROR_PATTERN.search(result.output)
        if match:
            return int(match.group(1))
        return result.returncode or -1

    def _describe(self, code: int, result: CommandResult) -> str:
        return self.KNOWN_ERRORS.get(code) or result.output or "Unknown error"

    def _failure(self, result: CommandResult, target: MappingTarget) -> AttemptResult:
        code = self._error_code(result)
        return AttemptResult.failed(code, self._describe(code, result), target)
