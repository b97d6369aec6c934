"""Session negotiation and finalization exchanges."""

from typing import Any
from urllib.parse import quote

import httpx

from common.logging_config import get_logger
from uploader.client import UploadClient
from uploader.exceptions import ProtocolError, ServerError
from uploader.models import UploadRequestParams

logger = get_logger(__name__)


def session_path(action: str, token: str) -> str:
    """Path of a per-session endpoint with the token percent-encoded."""
    return f"/{action}/{quote(token, safe='')}"


class SessionInitiator:
    """Negotiates a new upload session and returns its opaque token."""

    def __init__(self, client: UploadClient):
        self.client = client

    def prepare(self, params: UploadRequestParams) -> str:
        """
        Issue the prepare exchange.

        Args:
            params: Filename, expiry and optional password of the upload

        Returns:
            Session token (non-empty string)

        Raises:
            ServerError: If the server is unreachable or answers with a non-success status
            ProtocolError: If the response body has no string ``uuid`` field
        """
        logger.info(f"Preparing upload: filename={params.filename} expiry={params.time} {params.unit.value}")
        try:
            response = self.client.post_json('/prepare', params.to_payload())
        except httpx.TransportError as e:
            raise ServerError('prepare', None, str(e)) from e

        if not response.is_success:
            raise ServerError('prepare', response.status_code, UploadClient.error_detail(response))

        try:
            body = response.json()
        except ValueError:
            raise ProtocolError("Prepare response is not valid JSON") from None

        token = body.get('uuid') if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise ProtocolError("Could not get UUID of file entry")

        logger.info(f"Session negotiated [uuid={token}]")
        return token


class SessionFinalizer:
    """Commits a session once every chunk has been delivered."""

    def __init__(self, client: UploadClient):
        self.client = client

    def finish(self, token: str) -> Any:
        """
        Issue the finish exchange with an empty JSON payload.

        Args:
            token: Session token returned by prepare

        Returns:
            The server's confirmation body (decoded JSON, or raw text)

        Raises:
            ServerError: If the server is unreachable or answers with a non-success status
        """
        try:
            response = self.client.post_json(session_path('finish', token), {})
        except httpx.TransportError as e:
            raise ServerError('finish', None, str(e)) from e

        if not response.is_success:
            raise ServerError('finish', response.status_code, UploadClient.error_detail(response))

        logger.info(f"Session finalized [uuid={token}]")
        try:
            return response.json()
        except ValueError:
            return response.text
