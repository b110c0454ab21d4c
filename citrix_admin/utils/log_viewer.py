import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional

from ..config import Settings


class LogViewer:
    """Opens script logs in CMTrace (if configured) or the platform's default viewer."""

    def __init__(self, settings: Settings, launcher: Callable[..., subprocess.Popen] = subprocess.Popen):
        self._settings = settings
        self._launcher = launcher

    def viewer_command(self, log_file: Path) -> List[str]:
        if self._settings.log_viewer_path:
            return [self._settings.log_viewer_path, str(log_file)]
        if sys.platform == "win32":
            return ["notepad.exe", str(log_file)]
        if sys.platform == "darwin":
            return ["open", str(log_file)]
        return ["xdg-open", str(log_file)]

    def latest_log(self, script_name: Optional[str] = None) -> Optional[Path]:
        """Newest log file, optionally only for one script."""
        log_dir = self._settings.log_path
        if not log_dir.exists():
            return None

        pattern = f"{script_name}.log*" if script_name else "*.log*"
        log_files = [path for path in log_dir.glob(pattern) if path.is_file()]
        if not log_files:
            return None
        return max(log_files, key=lambda path: path.stat().st_mtime)

    def launch(self, log_file: Path) -> subprocess.Popen:
        log_file = Path(log_file)
        if not log_file.is_file():
            raise FileNotFoundError(f"Log file does not exist: {log_file}")

        command = self.viewer_command(log_file)
        logging.info(f"Opening {log_file} with {command[0]}")
        return self._launcher(command)
