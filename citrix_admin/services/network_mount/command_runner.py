"""Command Runner - runs platform commands with a timeout. SRP compliant."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence


@dataclass
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def output(self) -> str:
        """stdout and stderr joined, net.exe writes errors to either."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part).strip()


class CommandRunner:
    """Runs external commands. SRP: Process execution ONLY."""

    def __init__(self, timeout_seconds: float = 30.0, encoding: str = "cp850"):
        self._timeout = timeout_seconds
        self._encoding = encoding

    async def run(self, args: Sequence[str], redacted: Sequence[str] = ()) -> CommandResult:
        """
        Run args and capture output. Values in redacted are masked in log lines.
        """
        printable = " ".join("****" if arg in redacted else arg for arg in args)
        logging.debug(f"Running: {printable}")

        try:
            process = await asyncio.create_subprocess_exec(
                *args, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            logging.error(f"Could not start '{args[0]}': {e}")
            return CommandResult(returncode=-1, stderr=str(e))

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logging.error(f"Command timed out after {self._timeout}s: {printable}")
            process.kill()
            await process.wait()
            return CommandResult(returncode=-1, stderr="timed out", timed_out=True)

        return CommandResult(
            returncode=process.returncode,
            stdout=stdout.decode(self._encoding, errors="replace") if stdout else "",
            stderr=stderr.decode(self._encoding, errors="replace") if stderr else "",
        )
