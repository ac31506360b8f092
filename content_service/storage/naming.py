"""Storage key naming.

Envelope keys are URL-escaped content IDs. Asset keys are fingerprinted
names derived from the asset's original name and the digest of its bytes.

Format: {basename}-{sha256hex}{ext}

Examples:
    >>> from content_service.storage.naming import fingerprinted_name, escape_content_id
    >>> fingerprinted_name("img/logo.png", "abc123")
    'logo-abc123.png'
    >>> escape_content_id("https://github.com/org/repo/page")
    'https%3A%2F%2Fgithub.com%2Forg%2Frepo%2Fpage'
"""

from __future__ import annotations

import os
from pathlib import PurePosixPath
from urllib.parse import quote


def split_name(original_name: str) -> tuple[str, str]:
    """Split an uploaded file name into basename and extension.

    Rules:
        - Directory components (either slash style) are dropped
        - Only the last extension is split off ("a.tar.gz" -> "a.tar", ".gz")
        - Leading-dot names have no extension (".env" -> ".env", "")

    Args:
        original_name: Name supplied by the uploader.

    Returns:
        Tuple of (basename, extension including the dot).

    Raises:
        ValueError: If the name has no basename.
    """
    name = PurePosixPath(original_name.replace("\\", "/")).name
    if not name:
        raise ValueError(f"Asset name has no basename: {original_name!r}")
    return os.path.splitext(name)


def fingerprinted_name(original_name: str, digest: str) -> str:
    """Derive the content-addressed storage name for an asset.

    Args:
        original_name: Name supplied by the uploader.
        digest: Hex digest of the asset's bytes.

    Returns:
        Fingerprinted name string.
    """
    if not digest:
        raise ValueError("digest must be a non-empty hex string")
    basename, ext = split_name(original_name)
    return f"{basename}-{digest}{ext}"


def escape_content_id(content_id: str) -> str:
    """URL-escape a content ID for use as a blob key.

    Escapes everything outside the unreserved set ``A-Z a-z 0-9 - _ . ~``,
    so slashes never create pseudo-directories.
    """
    if not content_id:
        raise ValueError("content_id must be a non-empty string")
    return quote(content_id, safe="")
