"""Pydantic schemas for the file gallery.

This module defines the data models for stored files:
- FileKind: Enum for categorizing files (document, image)
- StoredFile: A file entry found in the upload directory
- FileEntry: One item of the GET /files listing
- FileUploadResponse: API response after a successful upload or update
- MessageResponse: Plain ``{"message"}`` body used for deletes and errors

Files are stored as ``<token>-<original name>`` in a single upload directory.
The kind of a file is never stored; it is derived from the extension each
time the directory is listed.
"""
from enum import Enum
from pathlib import PurePath
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class FileKind(str, Enum):
    """Supported file categories.

    - DOCUMENT: PDF files, rendered by the client as a first-page thumbnail
    - IMAGE: JPEG, PNG, GIF, displayed directly
    """
    DOCUMENT = "document"
    IMAGE = "image"

    @property
    def wire_type(self) -> str:
        """Value of the ``type`` field in listings ("pdf" or "image")."""
        return "pdf" if self is FileKind.DOCUMENT else "image"


# Allowed extensions and the kind each one maps to. Add new types here.
ALLOWED_EXTENSIONS: Dict[str, FileKind] = {
    ".pdf": FileKind.DOCUMENT,
    ".jpg": FileKind.IMAGE,
    ".jpeg": FileKind.IMAGE,
    ".png": FileKind.IMAGE,
    ".gif": FileKind.IMAGE,
}


def get_file_kind(filename: str) -> Optional[FileKind]:
    """Determine the file kind from a filename's extension.

    The lookup is case-insensitive. Returns None when the extension is not
    in ALLOWED_EXTENSIONS.

    Examples:
        >>> get_file_kind("report.PDF")
        <FileKind.DOCUMENT: 'document'>
        >>> get_file_kind("photo.jpeg")
        <FileKind.IMAGE: 'image'>
        >>> get_file_kind("setup.exe") is None
        True
    """
    return ALLOWED_EXTENSIONS.get(PurePath(filename).suffix.lower())


class StoredFile(BaseModel):
    """A file entry in the upload directory."""
    stored_name: str = Field(..., description="Unique filename on disk")
    kind: FileKind = Field(..., description="File category derived from the extension")

    def to_entry(self) -> "FileEntry":
        return FileEntry(filename=self.stored_name, type=self.kind.wire_type)


class FileEntry(BaseModel):
    """One item in the GET /files response."""
    filename: str = Field(..., description="Stored filename")
    type: Literal["pdf", "image"] = Field(..., description="Display type")


class FileUploadResponse(BaseModel):
    """Response after a successful upload or update."""
    message: str = Field(..., description="Human-readable result")
    file: str = Field(..., description="Stored filename of the new file")


class MessageResponse(BaseModel):
    """Response carrying only a message."""
    message: str
