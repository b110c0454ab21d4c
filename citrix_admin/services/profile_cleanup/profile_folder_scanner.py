import logging
import os
from pathlib import Path
from typing import Iterable, List, Sequence

from ...models import ArchivedUser, ProfileFolder


def calculate_folder_size(path: Path) -> int:
    """Sum of all file sizes below path. Unreadable entries are logged and skipped."""
    total = 0
    for root, _dirs, files in os.walk(path, onerror=lambda e: logging.warning(f"Cannot read {e.filename}: {e}")):
        for name in files:
            file_path = os.path.join(root, name)
            try:
                total += os.lstat(file_path).st_size
            except OSError as e:
                logging.warning(f"Cannot stat {file_path}: {e}")
    return total


class ProfileFolderScanner:
    """Finds profile folders of archived users across the configured UNC roots."""

    def __init__(self, suffixes: Sequence[str] = ("", ".V2", ".V6")):
        self._suffixes = list(suffixes) or [""]

    def scan(self, users: Iterable[ArchivedUser], roots: Sequence[str]) -> List[ProfileFolder]:
        users = list(users)
        folders: List[ProfileFolder] = []

        for root in roots:
            root_path = Path(root)
            if not root_path.is_dir():
                logging.warning(f"Profile root not reachable, skipping: {root}")
                continue

            for user in users:
                for suffix in self._suffixes:
                    candidate = root_path / f"{user.sam_account_name}{suffix}"
                    if not candidate.is_dir():
                        continue
                    size = calculate_folder_size(candidate)
                    logging.debug(f"Found {candidate} ({size} bytes)")
                    folders.append(ProfileFolder(user=user, path=str(candidate), size_bytes=size))

        logging.info(f"Found {len(folders)} profile folder(s) in {len(roots)} root(s)")
        return folders
