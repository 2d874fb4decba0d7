"""File storage service for the gallery server.

Owns the upload directory. Files are stored in: {upload_dir}/{token}-{name}
where token is the upload time in milliseconds. The directory listing is the
only record of stored files.
"""
import contextlib
import logging
import re
import time
from pathlib import Path, PurePath
from typing import List, Optional, Union

from .errors import NotFound, StorageUnavailable, UnsupportedFileType
from .schemas import StoredFile, get_file_kind

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def sanitize_filename(filename: str) -> str:
    """Reduce a client-supplied filename to a safe single path component.

    Directory parts (``/`` or ``\\`` separated) are dropped and any character
    outside ``[A-Za-z0-9._-]`` becomes an underscore. The result can be
    empty or lose its extension (``"a.pdf/"`` -> ``""``), so it must be
    classified again before use.

    Example:
        "../scans/My Photo (1).PNG" -> "My_Photo__1_.PNG"
    """
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return _UNSAFE_CHARS.sub("_", name)


class FileStorageService:
    """Service for managing the upload directory.

    All reads and writes of stored files go through this class. There is no
    locking: concurrent requests may interleave, and uniqueness of stored
    names relies on exclusive file creation.
    """

    _instance: Optional["FileStorageService"] = None
    _upload_dir: Path = Path("uploads")

    def __init__(self, upload_dir: Optional[Union[str, Path]] = None):
        """Initialize the file storage service."""
        if upload_dir:
            self._upload_dir = Path(upload_dir)
        self._ensure_upload_dir()

    @classmethod
    def get_instance(cls, upload_dir: Optional[Union[str, Path]] = None) -> "FileStorageService":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls(upload_dir)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def _ensure_upload_dir(self) -> None:
        """Ensure the upload directory exists."""
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"cannot create {self._upload_dir}: {exc}") from exc

    def _entry_path(self, stored_name: str) -> Path:
        # Only bare entry names are addressable; anything with a directory
        # part cannot name a stored file.
        if (
            not stored_name
            or stored_name in (".", "..")
            or "/" in stored_name
            or "\\" in stored_name
            or PurePath(stored_name).name != stored_name
        ):
            raise NotFound(stored_name)
        return self._upload_dir / stored_name

    def path_for(self, stored_name: str) -> Path:
        """Get the path on disk for a stored file.

        Raises:
            NotFound: If no such file is stored
        """
        path = self._entry_path(stored_name)
        if not path.is_file():
            raise NotFound(stored_name)
        return path

    def list_files(self) -> List[StoredFile]:
        """List every stored file, classified by extension.

        Entries are returned in name order, which is upload order since names
        start with the upload timestamp. Files with an extension outside the
        allowed set were not put there by this service; they are skipped.

        Raises:
            StorageUnavailable: If the directory cannot be read
        """
        try:
            paths = sorted(p for p in self._upload_dir.iterdir() if p.is_file())
        except OSError as exc:
            logger.error("Failed to read upload directory %s: %s", self._upload_dir, exc)
            raise StorageUnavailable(f"cannot read {self._upload_dir}: {exc}") from exc

        files = []
        for path in paths:
            kind = get_file_kind(path.name)
            if kind is None:
                logger.warning("Skipping unexpected file in upload directory: %s", path.name)
                continue
            files.append(StoredFile(stored_name=path.name, kind=kind))
        return files

    def store(self, content: bytes, original_name: str) -> str:
        """Validate and save an uploaded file.

        Args:
            content: File content as bytes
            original_name: Filename supplied by the client

        Returns:
            The stored filename, ``<token>-<sanitized original name>``

        Raises:
            UnsupportedFileType: If the cleaned name has no allowed extension
                (nothing is written)
            StorageUnavailable: If the file cannot be written
        """
        safe_name = sanitize_filename(original_name)
        if get_file_kind(safe_name) is None:
            raise UnsupportedFileType(original_name)

        token = _now_ms()
        while True:
            stored_name = f"{token}-{safe_name}"
            file_path = self._upload_dir / stored_name
            try:
                with file_path.open("xb") as fh:
                    fh.write(content)
            except FileExistsError:
                # Same name in the same millisecond; take the next token.
                token += 1
                continue
            except OSError as exc:
                with contextlib.suppress(OSError):
                    file_path.unlink()
                logger.error("Failed to write %s: %s", file_path, exc)
                raise StorageUnavailable(f"cannot write {stored_name}: {exc}") from exc
            break

        logger.info(f"Saved file: {file_path} ({len(content)} bytes)")
        return stored_name

    def remove(self, stored_name: str) -> None:
        """Delete a stored file.

        Raises:
            NotFound: If no such file is stored
            StorageUnavailable: If the file exists but cannot be deleted
        """
        file_path = self.path_for(stored_name)
        try:
            file_path.unlink()
        except FileNotFoundError:
            raise NotFound(stored_name) from None
        except OSError as exc:
            logger.error("Failed to delete %s: %s", file_path, exc)
            raise StorageUnavailable(f"cannot delete {stored_name}: {exc}") from exc
        logger.info(f"Deleted file: {file_path}")

    def replace(self, old_stored_name: str, content: bytes, original_name: str) -> str:
        """Replace a stored file with new content under a new stored name.

        The old file need not exist; in that case this is a plain store. The
        new file is written before the old one is removed, so a failure in
        between leaves both files rather than neither. If the old file cannot
        be deleted once the new one is written, the error is logged and the
        new name is still returned; the old file stays listed.

        Returns:
            The stored filename of the new file

        Raises:
            UnsupportedFileType: If the new filename is not allowed (the old
                file is left untouched)
            StorageUnavailable: If the new file cannot be written
        """
        stored_name = self.store(content, original_name)
        try:
            self.remove(old_stored_name)
        except NotFound:
            logger.debug("Nothing to replace at %s", old_stored_name)
        except StorageUnavailable as exc:
            logger.error("Stored %s but could not remove %s: %s", stored_name, old_stored_name, exc)
        logger.info(f"Replaced {old_stored_name} with {stored_name}")
        return stored_name
