"""Entry point for the upload server."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from server.config import SERVER_HOST, SERVER_PORT
from server.database import init_database
from server.exceptions import (
    ChunkpostServerError,
    ChunkTooLargeError,
    DownloadForbiddenError,
    ExpiryTooLongError,
    InvalidExpiryError,
    UploadNotFoundError,
)
from server.reaper import SessionReaper
from server.routes import upload_router
from server.schemas import ErrorResponse

logger = setup_logging('server')

app = FastAPI(
    title="chunkpost server",
    description="Receives large files as a prepare / append / finish session",
    version="1.0.0"
)

reaper = SessionReaper()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    
    start_time = time.time()
    
    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )
    
    response = await call_next(request)
    
    duration = time.time() - start_time
    
    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )
    
    response.headers["X-Request-ID"] = request_id
    
    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database and start the reaper on application startup.
    """
    logger.info("Server starting up...")
    init_database()
    logger.info("Database initialized")
    await reaper.start()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Stop background tasks on application shutdown.
    """
    logger.info("Server shutting down...")
    await reaper.stop()


def _error(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(detail=str(exc), code=code).model_dump())


@app.exception_handler(InvalidExpiryError)
async def invalid_expiry_handler(request: Request, exc: InvalidExpiryError):
    """
    Handle unknown units or non-positive lifetimes.
    """
    logger.warning(f"Invalid expiry: {exc} [request_id={request.state.request_id}]")
    return _error(status.HTTP_400_BAD_REQUEST, exc, "INVALID_UNIT")


@app.exception_handler(ExpiryTooLongError)
async def expiry_too_long_handler(request: Request, exc: ExpiryTooLongError):
    logger.warning(f"Expiry too long: {exc} [request_id={request.state.request_id}]")
    return _error(status.HTTP_400_BAD_REQUEST, exc, "EXPIRY_TOO_LONG")


@app.exception_handler(ChunkTooLargeError)
async def chunk_too_large_handler(request: Request, exc: ChunkTooLargeError):
    logger.warning(f"Chunk rejected: {exc} [request_id={request.state.request_id}]")
    return _error(status.HTTP_400_BAD_REQUEST, exc, "CHUNK_TOO_LARGE")


@app.exception_handler(DownloadForbiddenError)
async def download_forbidden_handler(request: Request, exc: DownloadForbiddenError):
    logger.warning(f"Download refused: {exc} [request_id={request.state.request_id}]")
    return _error(status.HTTP_403_FORBIDDEN, exc, "FORBIDDEN")


@app.exception_handler(UploadNotFoundError)
async def upload_not_found_handler(request: Request, exc: UploadNotFoundError):
    """
    Handle exchanges naming an unknown, finished or timed-out upload.
    """
    logger.warning(f"Upload not found: {exc} [request_id={request.state.request_id}]")
    return _error(status.HTTP_404_NOT_FOUND, exc, "UPLOAD_NOT_FOUND")


@app.exception_handler(ChunkpostServerError)
async def server_error_handler(request: Request, exc: ChunkpostServerError):
    """
    Fallback for any other server-side upload error.
    """
    logger.error(f"Upload error: {exc} [request_id={request.state.request_id}]", exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")


@app.get("/")
async def root():
    """
    Health check endpoint.
    """
    return {"status": "running", "service": "chunkpost"}


app.include_router(upload_router)


def main() -> None:
    """Run the server with uvicorn."""
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    main()
