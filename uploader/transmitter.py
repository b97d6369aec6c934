"""Sequential chunk delivery against a negotiated session."""

from typing import BinaryIO, Callable, Optional

import httpx

from common.logging_config import get_logger
from uploader.chunking import chunk_count, plan_chunks, progress_label
from uploader.client import UploadClient
from uploader.exceptions import InvalidParamsError, TransferError
from uploader.models import Chunk, ProgressEvent, UploadState
from uploader.session import session_path

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]
ChunkCallback = Callable[[UploadState, Chunk], None]


class ChunkTransmitter:
    """
    Sends the chunks of a payload one at a time.

    A chunk is only read and sent once the previous one has been
    acknowledged; the first rejected chunk aborts the whole transfer.
    """

    def __init__(
        self,
        client: UploadClient,
        chunk_size: int,
        progress: Optional[ProgressCallback] = None
    ):
        """
        Args:
            client: Transport used for the append exchanges
            chunk_size: Size of every chunk but the last, in bytes
            progress: Optional sink receiving a ProgressEvent before each chunk
        """
        if chunk_size <= 0:
            raise InvalidParamsError(f"chunk size must be positive, got {chunk_size}")
        self.client = client
        self.chunk_size = chunk_size
        self.progress = progress

    def transmit(
        self,
        token: str,
        source: BinaryIO,
        total_size: int,
        on_chunk: Optional[ChunkCallback] = None
    ) -> UploadState:
        """
        Transmit ``[0, total_size)`` of ``source`` against ``token``.

        Progress reported before chunk i is the fraction of bytes
        acknowledged before it, so the first event is always 0.

        Args:
            token: Session token
            source: Seekable binary stream holding the payload
            total_size: Number of bytes to send
            on_chunk: Called with the updated state after each acknowledged chunk

        Returns:
            Final upload state (offset == total_size)

        Raises:
            TransferError: On the first chunk that is not acknowledged
        """
        state = UploadState(token=token, total_size=total_size, chunk_size=self.chunk_size)
        count = chunk_count(total_size, self.chunk_size)
        path = session_path('append', token)

        logger.info(f"Transmitting {total_size} bytes in {count} chunk(s) [uuid={token}]")

        for chunk in plan_chunks(total_size, self.chunk_size):
            if self.progress is not None:
                self.progress(ProgressEvent(
                    fraction=state.offset / total_size,
                    label=progress_label(chunk.index, count),
                    chunk_index=chunk.index,
                    chunk_count=count,
                ))

            data = self._read(source, chunk)

            try:
                response = self.client.post_chunk(path, data)
            except httpx.TransportError as e:
                raise TransferError(chunk.index, chunk.start, None, str(e)) from e

            if not response.is_success:
                raise TransferError(
                    chunk.index, chunk.start, response.status_code, UploadClient.error_detail(response)
                )

            state.advance(chunk)
            logger.debug(f"Chunk {chunk.index + 1}/{count} acknowledged [range={chunk.start}-{chunk.end}]")
            if on_chunk is not None:
                on_chunk(state, chunk)

        return state

    @staticmethod
    def _read(source: BinaryIO, chunk: Chunk) -> bytes:
        source.seek(chunk.start)
        data = source.read(chunk.size)
        if len(data) != chunk.size:
            raise TransferError(
                chunk.index, chunk.start, None,
                f"source yielded {len(data)} of {chunk.size} bytes"
            )
        return data
