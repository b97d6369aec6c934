"""Drives one upload attempt through prepare, append and finish."""

import io
import os
import uuid
from pathlib import Path
from typing import Any, BinaryIO, Optional

from common.logging_config import get_logger
from uploader.client import UploadClient
from uploader.exceptions import InvalidParamsError, InvalidTransitionError, UploadError
from uploader.models import Chunk, UploadPhase, UploadRequestParams, UploadResult, UploadState
from uploader.session import SessionFinalizer, SessionInitiator
from uploader.transmitter import ChunkTransmitter, ProgressCallback

logger = get_logger(__name__)


class UploadAttempt:
    """
    State machine of a single attempt.

    IDLE -> PREPARING -> TRANSMITTING* -> FINALIZING -> DONE, with FAILED
    reachable from every non-terminal phase after IDLE. An attempt never
    moves backwards; a retry is a new attempt with a new session.
    """

    def __init__(self):
        self.attempt_id = uuid.uuid4().hex[:8]
        self.phase = UploadPhase.IDLE
        self.history = [UploadPhase.IDLE]
        self.token: Optional[str] = None
        self.bytes_sent = 0
        self.chunks_sent = 0

    def move_to(self, target: UploadPhase) -> None:
        if not self.phase.can_move_to(target):
            raise InvalidTransitionError(
                f"Attempt {self.attempt_id}: cannot move from {self.phase.value} to {target.value}"
            )
        if target is not self.phase:
            logger.info(f"Attempt {self.attempt_id}: {self.phase.value} -> {target.value}")
        self.phase = target
        self.history.append(target)

    def chunk_acknowledged(self, state: UploadState, chunk: Chunk) -> None:
        self.bytes_sent = state.offset
        self.chunks_sent = chunk.index + 1
        self.move_to(UploadPhase.FINALIZING if state.complete else UploadPhase.TRANSMITTING)

    def fail(self) -> None:
        if not self.phase.terminal and self.phase is not UploadPhase.IDLE:
            self.move_to(UploadPhase.FAILED)

    def result(self, confirmation: Any = None, error: Optional[UploadError] = None) -> UploadResult:
        return UploadResult(
            phase=self.phase,
            token=self.token,
            bytes_sent=self.bytes_sent,
            chunks_sent=self.chunks_sent,
            confirmation=confirmation,
            error=error,
            history=list(self.history),
        )


class UploadOrchestrator:
    """
    Sequences SessionInitiator, ChunkTransmitter and SessionFinalizer.

    Create one orchestrator per upload context. Every call to upload()
    is an independent attempt owning its own session token, so attempts
    never share state.
    """

    def __init__(
        self,
        client: UploadClient,
        chunk_size: int,
        progress: Optional[ProgressCallback] = None
    ):
        """
        Args:
            client: Transport shared by the three phases
            chunk_size: Chunk size in bytes (must be positive)
            progress: Optional sink for ProgressEvents
        """
        self.initiator = SessionInitiator(client)
        self.transmitter = ChunkTransmitter(client, chunk_size, progress)
        self.finalizer = SessionFinalizer(client)

    @property
    def chunk_size(self) -> int:
        return self.transmitter.chunk_size

    def upload(self, source: BinaryIO, total_size: int, params: UploadRequestParams) -> UploadResult:
        """
        Run one attempt end to end.

        Args:
            source: Seekable binary stream holding the payload
            total_size: Number of bytes of ``source`` to upload
            params: Negotiation parameters

        Returns:
            UploadResult in phase DONE, or FAILED with ``error`` set

        Raises:
            InvalidParamsError: If total_size is negative (no attempt is started)
        """
        if total_size < 0:
            raise InvalidParamsError(f"total size must not be negative, got {total_size}")

        attempt = UploadAttempt()
        logger.info(
            f"Attempt {attempt.attempt_id}: uploading {params.filename} "
            f"({total_size} bytes, chunk size {self.chunk_size})"
        )

        try:
            attempt.move_to(UploadPhase.PREPARING)
            attempt.token = self.initiator.prepare(params)

            if total_size == 0:
                attempt.move_to(UploadPhase.FINALIZING)
            else:
                attempt.move_to(UploadPhase.TRANSMITTING)
                self.transmitter.transmit(
                    attempt.token, source, total_size, on_chunk=attempt.chunk_acknowledged
                )

            confirmation = self.finalizer.finish(attempt.token)
            attempt.move_to(UploadPhase.DONE)
        except UploadError as e:
            logger.error(f"Attempt {attempt.attempt_id} failed during {attempt.phase.value}: {e}")
            attempt.fail()
            return attempt.result(error=e)
        except Exception:
            attempt.fail()
            raise

        logger.info(f"Attempt {attempt.attempt_id} done: {attempt.bytes_sent} bytes in {attempt.chunks_sent} chunk(s)")
        return attempt.result(confirmation=confirmation)

    def upload_bytes(self, data: bytes, params: UploadRequestParams) -> UploadResult:
        """Upload an in-memory payload."""
        return self.upload(io.BytesIO(data), len(data), params)

    def upload_file(
        self,
        path: os.PathLike,
        params: Optional[UploadRequestParams] = None,
        **param_kwargs
    ) -> UploadResult:
        """
        Upload a file from disk.

        Args:
            path: File to upload
            params: Negotiation parameters; built from ``param_kwargs`` when omitted,
                with ``filename`` defaulting to the file's base name
            **param_kwargs: time, unit, password and optionally filename

        Returns:
            UploadResult of the attempt
        """
        path = Path(path)
        if params is None:
            param_kwargs.setdefault('filename', path.name)
            params = UploadRequestParams(**param_kwargs)

        with open(path, 'rb') as source:
            total_size = os.fstat(source.fileno()).st_size
            return self.upload(source, total_size, params)
