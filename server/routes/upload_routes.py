"""Chunked upload API routes."""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import FileResponse

from server.schemas import AppendResponse, ErrorResponse, PrepareRequest, PrepareResponse
from server.services.upload_service import UploadService

router = APIRouter(tags=["Uploads"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "/prepare",
    response_model=PrepareResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def prepare_upload(request: PrepareRequest):
    """
    Negotiate a new upload session.

    Parameters:
        - password: Optional download password (null for none)
        - time: Positive lifetime magnitude
        - unit: One of days, hours, minutes, seconds
        - filename: Name under which the file is stored

    Returns:
        - uuid: Session token used by append and finish

    Raises:
        - 400: Non-positive time, unknown unit or lifetime longer than one year
        - 422: Malformed request body
    """
    upload = UploadService().prepare(
        filename=request.filename,
        time=request.time,
        unit=request.unit,
        password=request.password,
    )
    return PrepareResponse(uuid=upload.uuid)


@router.post("/append/{uuid}", response_model=AppendResponse, responses={400: {"model": ErrorResponse}, **NOT_FOUND})
def append_chunk(uuid: str, chunk: UploadFile = File(...)):
    """
    Append one chunk to a pending upload.

    Raises:
        - 400: Chunk larger than the server chunk size
        - 404: Unknown, finished or timed-out upload
    """
    size = chunk.size
    if size is None:
        chunk.file.seek(0, 2)
        size = chunk.file.tell()
        chunk.file.seek(0)

    total = UploadService().append(uuid, chunk.file, size)
    return AppendResponse(size=total)


@router.post("/finish/{uuid}", responses=NOT_FOUND)
def finish_upload(uuid: str):
    """
    Commit a pending upload.

    Raises:
        - 404: Unknown, finished or timed-out upload
    """
    UploadService().finish(uuid)
    return {}


def _serve(uuid: str, password: Optional[str]) -> FileResponse:
    service = UploadService()
    upload = service.get_download(uuid, password)
    return FileResponse(service.data_path(upload.uuid), filename=upload.filename)


@router.get("/downloads/{uuid}", responses={403: {"model": ErrorResponse}, **NOT_FOUND})
def download_file(uuid: str):
    """
    Download a finished upload that has no password.

    Raises:
        - 403: Upload is password protected
        - 404: Unknown, unfinished or expired upload
    """
    return _serve(uuid, None)


@router.post("/downloads/{uuid}", responses={403: {"model": ErrorResponse}, **NOT_FOUND})
def unlock_file(uuid: str, password: str = Form("")):
    """
    Download a finished upload, unlocking it with the form field ``password``.

    Raises:
        - 403: Missing or wrong password
        - 404: Unknown, unfinished or expired upload
    """
    return _serve(uuid, password)
