# ollacoder/core/file_store.py
"""
Workspace file store: read, write, delete and list files by path relative
to a working directory.
"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .config import DEFAULT_IGNORE_DIRS, DEFAULT_IGNORE_EXTENSIONS, DEFAULT_IGNORE_SUFFIXES
from .exceptions import FileStoreError

logger = logging.getLogger(__name__)

MARKDOWN_FENCE = re.compile(r"^```[a-zA-Z0-9_+-]*\r?\n|^```\s*$", re.MULTILINE)


def strip_markdown_fences(content: str) -> str:
    """Drop fence marker lines the model left around or inside the code."""
    return MARKDOWN_FENCE.sub("", content)


class WorkspaceFileStore:
    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        ignore_dirs: Optional[Iterable[str]] = None,
        ignore_extensions: Optional[Iterable[str]] = None,
        ignore_suffixes: Optional[Iterable[str]] = None,
    ):
        self._root = Path(root).resolve() if root else Path.cwd().resolve()
        self.ignore_dirs = {d.lower() for d in (ignore_dirs if ignore_dirs is not None else DEFAULT_IGNORE_DIRS)}
        # suffix checks, so multi-part extensions like ".min.js" work
        self.ignore_suffixes = tuple(
            s.lower() for s in list(ignore_extensions if ignore_extensions is not None else DEFAULT_IGNORE_EXTENSIONS)
            + list(ignore_suffixes if ignore_suffixes is not None else DEFAULT_IGNORE_SUFFIXES)
        )

    @property
    def working_directory(self) -> Path:
        return self._root

    def change_directory(self, path: Union[str, Path]) -> Path:
        target = Path(path).expanduser()
        if not target.is_absolute():
            target = self._root / target
        target = target.resolve()
        if not target.is_dir():
            raise FileStoreError(f"Directory not found: {target}", str(path))
        self._root = target
        return self._root

    # ==================== listing ====================

    def list_files(self) -> List[str]:
        """All non-ignored files under the working directory, as sorted POSIX relative paths."""
        files: List[str] = []
        self._walk(self._root, files)
        return sorted(files)

    def _walk(self, directory: Path, files: List[str]):
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        subdirs = []
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                if entry.name.lower() not in self.ignore_dirs:
                    subdirs.append(Path(entry.path))
            elif not entry.name.lower().endswith(self.ignore_suffixes):
                files.append(Path(entry.path).relative_to(self._root).as_posix())

        for subdir in subdirs:
            self._walk(subdir, files)

    # ==================== file operations ====================

    def _resolve(self, relative_path: str) -> Path:
        if not relative_path or not relative_path.strip():
            raise FileStoreError("File path cannot be empty", relative_path or "")
        full_path = (self._root / relative_path.strip()).resolve()
        if full_path != self._root and self._root not in full_path.parents:
            raise FileStoreError(f"Path '{relative_path}' is outside the working directory", relative_path)
        return full_path

    def read(self, relative_path: str) -> Optional[str]:
        """File content, or ``None`` when the file does not exist."""
        full_path = self._resolve(relative_path)
        if not full_path.is_file():
            return None
        try:
            return full_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FileStoreError(f"Failed to read '{relative_path}': {e}", relative_path) from e

    def write(self, relative_path: str, content: str) -> Path:
        """
        Write ``content`` to ``relative_path``, creating parent directories.

        Raises:
            FileStoreError: the path has no file name with an extension, is a
                directory, or the write fails.
        """
        full_path = self._resolve(relative_path)
        if "." not in full_path.name:
            raise FileStoreError(
                f"Invalid file path '{relative_path}'. Must include a filename with extension.", relative_path
            )
        if full_path.is_dir():
            raise FileStoreError(f"Path '{full_path}' is a directory, not a file.", relative_path)

        try:
            data = strip_markdown_fences(content).encode("utf-8")
        except UnicodeError as e:
            raise FileStoreError(f"Failed to write '{relative_path}': {e}", relative_path) from e

        # existing content is only replaced once the new bytes are on disk
        temp_file = full_path.with_name(full_path.name + ".tmp")
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            temp_file.write_bytes(data)
            temp_file.replace(full_path)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise FileStoreError(f"Failed to write '{relative_path}': {e}", relative_path) from e
        logger.debug("Wrote %s", full_path)
        return full_path

    def delete(self, relative_path: str) -> bool:
        """Delete a file. Returns False when it did not exist."""
        full_path = self._resolve(relative_path)
        if not full_path.is_file():
            return False
        try:
            full_path.unlink()
        except OSError as e:
            raise FileStoreError(f"Failed to delete '{relative_path}': {e}", relative_path) from e
        return True
