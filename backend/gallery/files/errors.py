"""Error types raised by the file storage layer.

Every error carries the HTTP status and the client-facing message it is
rendered with, so the app can turn any of them into a ``{"message": ...}``
body with a single exception handler.
"""


class FileServiceError(Exception):
    """Base exception for file storage operations."""

    status_code: int = 500
    message: str = "File operation failed"


class UnsupportedFileType(FileServiceError):
    """The file extension is not in the allowed set."""

    status_code = 415
    message = "Only PDF or Image files are allowed"

    def __init__(self, filename: str):
        super().__init__(f"Unsupported file type: {filename}")
        self.filename = filename


class MissingFile(FileServiceError):
    """A request needed a file part but none was supplied."""

    status_code = 400
    message = "No file uploaded"

    def __init__(self):
        super().__init__(self.message)


class NotFound(FileServiceError):
    """No stored file exists under the given name."""

    status_code = 404
    message = "File not found"

    def __init__(self, stored_name: str):
        super().__init__(f"File not found: {stored_name}")
        self.stored_name = stored_name


class StorageUnavailable(FileServiceError):
    """The upload directory could not be read or written."""

    status_code = 500
    message = "Storage unavailable"

    def __init__(self, detail: str):
        super().__init__(f"Storage unavailable: {detail}")
