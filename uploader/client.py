"""HTTP transport shared by the three upload phases."""

import uuid
from typing import Optional

import httpx

from common.constants import CHUNK_FIELD_NAME
from common.logging_config import get_logger
from uploader.config import Config

logger = get_logger(__name__)


class UploadClient:
    """Thin wrapper over httpx.Client: one request per call, never retried."""

    def __init__(self, config: Config, session: Optional[httpx.Client] = None):
        """
        Initialize upload client.

        Args:
            config: Configuration instance
            session: Pre-built httpx.Client (tests inject a mock transport here)
        """
        self.config = config
        self.session = session or httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized UploadClient [base_url={self.session.base_url}]")

    def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object, whatever its status

        Raises:
            httpx.TransportError: If the server cannot be reached or the exchange times out
        """
        self.request_id = str(uuid.uuid4())
        headers = kwargs.setdefault('headers', {})
        headers['X-Request-ID'] = self.request_id
        headers.setdefault('Accept', 'application/json')

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        try:
            response = self.session.request(method, endpoint, **kwargs)
        except httpx.TransportError as e:
            logger.error(
                f"Network error: {method} {endpoint} error={type(e).__name__}: {e} [request_id={self.request_id}]"
            )
            raise

        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
        )
        if not response.is_success:
            logger.warning(
                f"Request rejected: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
            )
        return response

    def post_json(self, endpoint: str, payload: dict) -> httpx.Response:
        """POST a JSON document."""
        return self._request('POST', endpoint, json=payload)

    def post_chunk(self, endpoint: str, data: bytes) -> httpx.Response:
        """POST one chunk as the multipart field ``chunk``."""
        files = {CHUNK_FIELD_NAME: ('blob', data, 'application/octet-stream')}
        return self._request('POST', endpoint, files=files)

    @staticmethod
    def error_detail(response: httpx.Response) -> str:
        """
        Extract a human readable reason from an error response.

        Args:
            response: HTTP response object

        Returns:
            The server's ``detail`` (and ``code``) when the body is JSON, else the raw text
        """
        try:
            error_data = response.json()
        except ValueError:
            return response.text.strip()

        if not isinstance(error_data, dict):
            return str(error_data)

        detail = error_data.get('detail') or error_data.get('error') or ''
        code = error_data.get('code')
        if code:
            return f"{detail} (Code: {code})" if detail else f"Code: {code}"
        return str(detail)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> 'UploadClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
