"""API key authentication for mutating routes.

Keys are accepted in either header form:

    Authorization: deconst apikey="<key>"
    X-API-Key: <key>

When no API_KEYS are configured the dependency is a no-op so local
development works unauthenticated.
"""

from __future__ import annotations

import logging
import re

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

AUTHORIZATION_PATTERN = re.compile(r'^deconst\s+apikey="?([^"]+)"?\s*$', re.IGNORECASE)


def extract_api_key(request: Request) -> str | None:
    """Pull the presented API key out of the request headers."""
    header = request.headers.get("Authorization")
    if header:
        match = AUTHORIZATION_PATTERN.match(header.strip())
        if match:
            return match.group(1)

    return request.headers.get("X-API-Key") or None


async def require_api_key(request: Request) -> str | None:
    """Resolve the calling key's name against the app's configured API keys.

    Returns:
        The key name, or None when auth is disabled.

    Raises:
        HTTPException 401: If auth is enabled and the key is missing or unknown.
    """
    settings = request.app.state.settings
    if not settings.auth_enabled:
        return None

    key = extract_api_key(request)
    if not key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="An API key is required",
        )

    name = settings.api_keys.get(key)
    if name is None:
        logger.warning(f"Rejected request to {request.url.path} with an unknown API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
    return name
