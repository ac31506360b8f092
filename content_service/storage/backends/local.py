"""Local filesystem blob store using pathlib.

Objects live at ``{root}/{container}/{key}``. Keys that cannot be used as a
file name as-is (leading dot, path separators, or longer than
``MAX_NAME_BYTES``) are stored under ``{root}/{container}/.hashed/{sha256}``
instead. Content type and access flag are kept in a JSON sidecar under
``{root}/{container}/.meta/``.
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from content_service.errors import NotFoundError
from content_service.storage.backends.base import BlobData, BlobStore, iter_blob_data

META_DIR = ".meta"
HASHED_DIR = ".hashed"

# Leaves room for the ".{name}.partial" and "{name}.json" variants under
# the usual 255-byte file name limit.
MAX_NAME_BYTES = 200


def relative_path(key: str) -> PurePosixPath:
    """Map a blob key to its path relative to the container directory.

    Plain keys map to themselves. Every other key maps to the SHA-256 of the
    key inside ``HASHED_DIR``; plain keys never start with a dot, so the two
    spaces cannot collide.

    Raises:
        ValueError: If the key is empty.
    """
    if not key:
        raise ValueError("Blob key must be a non-empty string")

    plain = (
        not key.startswith(".")
        and not any(sep in key for sep in ("/", "\\", "\x00"))
        and len(key.encode("utf-8")) <= MAX_NAME_BYTES
    )
    if plain:
        return PurePosixPath(key)
    return PurePosixPath(HASHED_DIR, hashlib.sha256(key.encode("utf-8")).hexdigest())


class LocalBlobStore(BlobStore):
    """Pathlib-based local filesystem blob store."""

    def __init__(self, root: str, container: str, public_base_url: str | None = None) -> None:
        self.root = Path(root)
        self.container = container
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.base_dir = self.root / container

    def _path(self, key: str) -> Path:
        return self.base_dir / relative_path(key)

    def _meta_path(self, key: str) -> Path:
        relative = relative_path(key)
        return self.base_dir / META_DIR / relative.with_name(f"{relative.name}.json")

    async def put(
        self,
        key: str,
        data: BlobData,
        content_type: str | None = None,
        public: bool = False,
    ) -> None:
        """Stream an object to disk, then move it into place."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(f".{path.name}.partial")

        try:
            with partial.open("wb") as f:
                async for chunk in iter_blob_data(data):
                    f.write(chunk)
            os.replace(partial, path)
        finally:
            partial.unlink(missing_ok=True)

        meta_path = self._meta_path(key)
        meta_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.write_text(
            json.dumps({"content_type": content_type, "public": public}),
            encoding="utf-8",
        )

    async def get(self, key: str) -> bytes:
        """Read a local object."""
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            raise NotFoundError(key, operation="blob.get") from None

    async def delete(self, key: str) -> None:
        """Delete a local object and its sidecar."""
        self._path(key).unlink(missing_ok=True)
        self._meta_path(key).unlink(missing_ok=True)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{quote(relative_path(key).as_posix())}"
        return self._path(key).absolute().as_uri()
