"""Profile Cleanup Service - deletes profile folders of archived AD users after confirmation."""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .archived_user_directory import ArchivedUserDirectory
from .profile_folder_scanner import ProfileFolderScanner
from ...core.exceptions import OperationCancelled
from ...models import CleanupPlan, CleanupResult


def _clear_readonly_and_retry(func, path, _exc) -> None:
    # Roaming profiles carry read-only desktop.ini and friends
    os.chmod(path, stat.S_IWRITE)
    func(path)


class ProfileCleanupService:
    """SRP: Plan, confirm and delete ONLY. Lookups are delegated."""

    def __init__(
        self,
        directory: ArchivedUserDirectory,
        scanner: ProfileFolderScanner,
        roots: Sequence[str],
        console: Optional[Console] = None,
    ):
        self._directory = directory
        self._scanner = scanner
        self._roots = list(roots)
        self._console = console or Console()

    def plan(self) -> CleanupPlan:
        if not self._roots:
            raise ValueError("No profile roots configured (PROFILE_ROOTS)")

        users = self._directory.find_archived_users()
        folders = self._scanner.scan(users, self._roots)
        plan = CleanupPlan(folders=folders)
        logging.info(f"Cleanup plan: {len(plan.folders)} folder(s), {plan.total_gb:.2f} GB")
        return plan

    def render_plan(self, plan: CleanupPlan) -> None:
        table = Table(title="Profile folders of archived users")
        table.add_column("User", style="cyan", no_wrap=True)
        table.add_column("Folder", style="white")
        table.add_column("Size (MB)", justify="right", style="yellow")

        for folder in plan.folders:
            table.add_row(folder.user.sam_account_name, folder.path, f"{folder.size_mb:,.1f}")

        self._console.print(table)
        self._console.print(f"Total: [bold]{len(plan.folders)}[/] folder(s), [bold]{plan.total_gb:.2f} GB[/]")

    def execute(
        self,
        plan: CleanupPlan,
        confirm: Callable[[str], bool],
        dry_run: bool = False,
    ) -> List[CleanupResult]:
        """
        Delete every folder in plan after confirm() agrees.

        Raises:
            OperationCancelled: If the operator declines.
        """
        if plan.is_empty:
            logging.info("Nothing to clean up")
            return []

        self.render_plan(plan)
        action = "Simulate deletion of" if dry_run else "Delete"
        if not confirm(f"{action} {len(plan.folders)} folder(s), {plan.total_gb:.2f} GB?"):
            logging.info("Profile cleanup declined by operator")
            raise OperationCancelled("Profile cleanup cancelled")

        results = [self._delete(folder.path, folder.size_bytes, dry_run) for folder in plan.folders]

        freed = sum(result.freed_bytes for result in results)
        failed = sum(1 for result in results if not result.deleted)
        logging.info(
            f"Profile cleanup finished: {len(results) - failed} deleted, {failed} failed, "
            f"{freed / (1024 ** 3):.2f} GB freed{' (dry run)' if dry_run else ''}"
        )
        return results

    def _delete(self, path: str, size_bytes: int, dry_run: bool) -> CleanupResult:
        if dry_run:
            logging.info(f"[dry run] Would delete {path}")
            return CleanupResult(path=path, deleted=True, freed_bytes=size_bytes)

        try:
            shutil.rmtree(path, onexc=_clear_readonly_and_retry)
        except OSError as e:
            logging.error(f"Could not delete {path}: {e}")
            return CleanupResult(path=path, deleted=False, error=str(e))

        if Path(path).exists():
            logging.error(f"{path} still exists after delete")
            return CleanupResult(path=path, deleted=False, error="Folder still exists after delete")

        logging.info(f"Deleted {path}")
        return CleanupResult(path=path, deleted=True, freed_bytes=size_bytes)
