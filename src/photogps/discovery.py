"""
File discovery for PhotoGPS.

Walks a directory tree in parallel: each directory is listed by one task of a
ThreadPoolExecutor and every subdirectory found becomes a new task. Files are
appended to a shared deque, so the order of the result is not meaningful.
Unreadable directories and entries are skipped without aborting the scan.
"""

import logging
import os
import stat
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Deque, Iterable, List, Optional, Set

from .constants import DISCOVERY_PROGRESS_INTERVAL, PHOTO_EXTENSIONS
from .exceptions import DirectoryNotFoundError
from .progress import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)

# Only Windows reports file attributes
_SKIPPED_ATTRIBUTES = (stat.FILE_ATTRIBUTE_SYSTEM | stat.FILE_ATTRIBUTE_TEMPORARY) if os.name == "nt" else 0


class FileDiscovery:
    """Finds candidate photo files below a root directory.

    Attributes:
        filter_extensions: If True, only files with a known photo/raw
            extension are returned; otherwise every regular file is.
        extensions: Lowercase extensions accepted when filtering.
        max_workers: Size of the scanning pool (None = executor default).
    """

    def __init__(
        self,
        filter_extensions: bool = True,
        extensions: Iterable[str] = PHOTO_EXTENSIONS,
        max_workers: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
        progress_interval: float = DISCOVERY_PROGRESS_INTERVAL,
    ) -> None:
        self.filter_extensions = filter_extensions
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.max_workers = max_workers
        self.progress_callback = progress_callback
        self.progress_interval = progress_interval

    def discover(self, root: Path) -> List[Path]:
        """Recursively collect files below ``root``.

        Raises:
            DirectoryNotFoundError: If ``root`` is missing or not a directory.
        """
        root = Path(root)
        if not root.is_dir():
            raise DirectoryNotFoundError(root)

        found: Deque[Path] = deque()
        progress = ProgressReporter(
            total=None,
            label="Found",
            interval=self.progress_interval,
            callback=self.progress_callback,
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending: Set[Future] = {executor.submit(self._scan_directory, root, found, progress)}
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    for subdir in future.result():
                        pending.add(executor.submit(self._scan_directory, subdir, found, progress))

        progress.finish()
        logger.info(f"Discovered {len(found)} files under {root}")
        return list(found)

    def _scan_directory(self, directory: Path, found: Deque[Path], progress: ProgressReporter) -> List[Path]:
        """List one directory. Returns its subdirectories; files go to ``found``."""
        subdirs: List[Path] = []
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        if self._is_skipped(entry):
                            continue
                        if entry.is_dir(follow_symlinks=False):
                            subdirs.append(Path(entry.path))
                        elif entry.is_file() and self._accepts(entry.name):
                            found.append(Path(entry.path))
                            progress.advance()
                    except OSError as e:
                        logger.debug(f"Skipping inaccessible entry {entry.path}: {e}")
        except OSError as e:
            logger.debug(f"Skipping inaccessible directory {directory}: {e}")
        return subdirs

    def _is_skipped(self, entry: os.DirEntry) -> bool:
        if not _SKIPPED_ATTRIBUTES:
            return False
        attributes = getattr(entry.stat(follow_symlinks=False), "st_file_attributes", 0)
        return bool(attributes & _SKIPPED_ATTRIBUTES)

    def _accepts(self, name: str) -> bool:
        if not self.filter_extensions:
            return True
        return os.path.splitext(name)[1].lower() in self.extensions


def discover(root: Path, **kwargs) -> List[Path]:
    """Shortcut for ``FileDiscovery(**kwargs).discover(root)``."""
    return FileDiscovery(**kwargs).discover(root)
