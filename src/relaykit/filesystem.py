"""
File-access collaborator.

Tasks never touch the disk directly; they go through an object that
satisfies the FileAccess protocol. LocalFileSystem is the production
implementation.
"""

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol, Union

from relaykit.exceptions import FileAccessError
from relaykit.logging_config import logger

PathLike = Union[str, Path]


class FileAccess(Protocol):
    """Operations the core needs from its environment."""

    def read(self, path: PathLike) -> str: ...

    def write(self, path: PathLike, text: str) -> None: ...

    def exists(self, path: PathLike) -> bool: ...

    def create_directory(self, path: PathLike) -> None: ...

    def find_file_matching_name(self, directory: PathLike, name: str) -> Optional[Path]: ...


class LocalFileSystem:
    """
    FileAccess backed by the local disk.

    Features:
    - UTF-8 reads that keep the original line endings
    - Atomic writes (temp file + rename)
    - Every OS failure surfaces as FileAccessError carrying the path
    """

    def read(self, path: PathLike) -> str:
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(str(path), f"Failed to read file ({e})") from e

    def write(self, path: PathLike, text: str) -> None:
        """
        Write file atomically using temp file + rename.

        The temp file is created next to the target so the rename stays
        on the same filesystem.
        """
        target = Path(path)
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=f".{target.name}.",
                suffix=".tmp"
            )
        except OSError as e:
            raise FileAccessError(str(path), f"Failed to write file ({e})") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            os.replace(temp_path, str(target))
        except OSError as e:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise FileAccessError(str(path), f"Failed to write file ({e})") from e

        logger.debug(f"Atomic write completed: {target}")

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def create_directory(self, path: PathLike) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileAccessError(str(path), f"Failed to create directory ({e})") from e
        logger.debug(f"Created directory: {path}")

    def find_file_matching_name(self, directory: PathLike, name: str) -> Optional[Path]:
        """Return directory/name if the directory lists an entry with exactly that name."""
        try:
            entries = os.listdir(directory)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FileAccessError(str(directory), f"Failed to list directory ({e})") from e

        for entry in entries:
            if entry == name:
                return Path(directory) / entry
        return None


def relative_import_path(from_file: Path, target_file: Path) -> str:
    """
    Module specifier for importing target_file from from_file.

    The extension is dropped and the path always starts with './' or '../'.
    """
    target_no_ext = target_file.with_suffix("")
    rel = os.path.relpath(target_no_ext, from_file.parent)
    posix = PurePosixPath(Path(rel).as_posix()).as_posix()
    if not posix.startswith("."):
        posix = "./" + posix
    return posix
