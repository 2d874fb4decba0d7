"""FastAPI router for the file gallery endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, File, UploadFile

from .errors import MissingFile
from .schemas import FileEntry, FileUploadResponse, MessageResponse
from .service import FileStorageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


def _service() -> FileStorageService:
    return FileStorageService.get_instance()


def _require_file(file: Optional[UploadFile]) -> UploadFile:
    if file is None or not file.filename:
        raise MissingFile()
    return file


@router.get("/files", response_model=List[FileEntry])
async def list_files() -> List[FileEntry]:
    """List all stored files.

    Returns:
        JSON array of ``{filename, type}`` objects, where type is "pdf" or
        "image". Empty when nothing has been uploaded.
    """
    return [f.to_entry() for f in _service().list_files()]


@router.post("/upload", response_model=FileUploadResponse)
async def upload_file(file: Optional[UploadFile] = File(None)) -> FileUploadResponse:
    """Upload a PDF or image file.

    Args:
        file: Multipart file part named ``file``

    Returns:
        FileUploadResponse with the stored filename

    Raises:
        MissingFile: 400 if no file part was sent
        UnsupportedFileType: 415 if the extension is not allowed
    """
    upload = _require_file(file)
    content = await upload.read()

    stored_name = _service().store(content, upload.filename)
    logger.info("[files] Uploaded %s as %s (%d bytes)", upload.filename, stored_name, len(content))
    return FileUploadResponse(message="File uploaded", file=stored_name)


@router.delete("/delete/{filename}", response_model=MessageResponse)
async def delete_file(filename: str) -> MessageResponse:
    """Delete a stored file.

    Raises:
        NotFound: 404 if no file is stored under ``filename``
    """
    _service().remove(filename)
    logger.info("[files] Deleted %s", filename)
    return MessageResponse(message="File deleted")


@router.put("/update/{filename}", response_model=FileUploadResponse)
async def update_file(filename: str, file: Optional[UploadFile] = File(None)) -> FileUploadResponse:
    """Replace a stored file with a newly uploaded one.

    The new file gets a new stored name. The missing-file and file-type
    checks run before the old file is touched, so a rejected update leaves
    it in place. A missing old file is not an error.

    Args:
        filename: Stored name of the file to replace
        file: Multipart file part named ``file``

    Returns:
        FileUploadResponse with the new stored filename
    """
    upload = _require_file(file)
    content = await upload.read()

    stored_name = _service().replace(filename, content, upload.filename)
    logger.info("[files] Updated %s -> %s", filename, stored_name)
    return FileUploadResponse(message="File updated", file=stored_name)
