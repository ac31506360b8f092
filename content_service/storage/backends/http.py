"""Object store backend speaking a Swift / Cloud Files style REST API.

Objects are addressed as ``{endpoint}/{container}/{key}``:

    PUT    -> create or replace (body streamed, Content-Type recorded)
    GET    -> 200 with body, 404 when missing
    DELETE -> 204, 404 when missing (treated as success)

Examples:
    >>> store = HttpBlobStore("https://storage.example.com/v1/AUTH_acct", "content",
    ...                       auth_token="tok")
    >>> await store.put("post-42", b'{"title": "Hi"}', content_type="application/json")
    >>> await store.get("post-42")
    b'{"title": "Hi"}'
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from content_service.errors import BackendError, NotFoundError
from content_service.storage.backends.base import BlobData, BlobStore, iter_blob_data

logger = logging.getLogger(__name__)


class HttpBlobStore(BlobStore):
    """Blob store backed by an HTTP object storage service.

    Attributes:
        endpoint: Account-level storage URL
        container: Container name
        auth_token: Token sent as X-Auth-Token (optional)
        public_base_url: CDN base URL used for public object URLs (optional)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        endpoint: str,
        container: str,
        auth_token: str | None = None,
        public_base_url: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP blob store.

        Args:
            endpoint: Account-level storage URL.
            container: Container name.
            auth_token: Token sent as X-Auth-Token (optional).
            public_base_url: CDN base URL for public object URLs (optional).
            timeout: Request timeout in seconds.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self.endpoint = endpoint.rstrip("/")
        self.container = container
        self.auth_token = auth_token
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get httpx async client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            headers = {"User-Agent": "content-service"}
            if self.auth_token:
                headers["X-Auth-Token"] = self.auth_token
            self._client = httpx.AsyncClient(
                base_url=f"{self.endpoint}/{quote(self.container)}",
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _object_path(self, key: str) -> str:
        return f"/{quote(key, safe='')}"

    def _handle_error(self, response: httpx.Response, operation: str, key: str) -> None:
        """Convert HTTP errors to content service errors.

        Raises:
            NotFoundError: For 404 responses.
            BackendError: For any other non-2xx response.
        """
        if response.status_code == 404:
            raise NotFoundError(key, operation=operation)
        raise BackendError(
            f"Object store returned {response.status_code} for [{key}]",
            operation=operation,
            status_code=response.status_code,
        )

    async def put(
        self,
        key: str,
        data: BlobData,
        content_type: str | None = None,
        public: bool = False,
    ) -> None:
        headers = {}
        if content_type:
            headers["Content-Type"] = content_type
        if public:
            headers["Access-Control-Allow-Origin"] = "*"

        content = data if isinstance(data, bytes) else iter_blob_data(data)
        try:
            response = await self.client.put(
                self._object_path(key),
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise BackendError(f"Upload of [{key}] failed: {e}", operation="blob.put") from e

        if response.status_code >= 300:
            self._handle_error(response, "blob.put", key)
        logger.debug(f"Uploaded [{self.container}/{key}] ({response.status_code})")

    async def get(self, key: str) -> bytes:
        try:
            response = await self.client.get(self._object_path(key))
        except httpx.HTTPError as e:
            raise BackendError(f"Download of [{key}] failed: {e}", operation="blob.get") from e

        if response.status_code != 200:
            self._handle_error(response, "blob.get", key)
        return response.content

    async def delete(self, key: str) -> None:
        try:
            response = await self.client.delete(self._object_path(key))
        except httpx.HTTPError as e:
            raise BackendError(f"Delete of [{key}] failed: {e}", operation="blob.delete") from e

        if response.status_code == 404:
            logger.debug(f"Delete of missing object [{self.container}/{key}] ignored")
            return
        if response.status_code >= 300:
            self._handle_error(response, "blob.delete", key)

    def public_url(self, key: str) -> str:
        base = self.public_base_url or f"{self.endpoint}/{quote(self.container)}"
        return f"{base}{self._object_path(key)}"
