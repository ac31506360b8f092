"""Content API endpoints.

Endpoints:
    PUT /api/v1/content/{content_id} - Store an envelope
    GET /api/v1/content/{content_id} - Retrieve an envelope (+ assets)
    DELETE /api/v1/content/{content_id} - Delete an envelope
    GET /api/v1/search - List indexed envelope projections

Content IDs may contain slashes (they are often URLs), so the path
parameter uses the ``path`` converter.

Tests:
    - tests/integration/test_api_content.py
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from content_service.auth import require_api_key
from content_service.core.coordinator import EnvelopeCoordinator
from content_service.dependencies import get_coordinator, get_services, Services
from content_service.errors import ContentServiceError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["content"])


@router.put("/content/{content_id:path}", status_code=status.HTTP_204_NO_CONTENT)
async def store_content(
    content_id: str,
    envelope: dict[str, Any] = Body(...),
    api_key_name: str | None = Depends(require_api_key),
    coordinator: EnvelopeCoordinator = Depends(get_coordinator),
) -> Response:
    """Store an envelope under a content ID."""
    logger.info(f"({api_key_name}) Storing content with ID: [{content_id}]")

    try:
        await coordinator.store(content_id, envelope)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ContentServiceError as e:
        logger.error(f"({api_key_name}) Unable to store content [{content_id}]: {e}")
        raise HTTPException(status_code=e.status_code, detail="Unable to store content.")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/content/{content_id:path}")
async def retrieve_content(
    content_id: str,
    coordinator: EnvelopeCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Retrieve an envelope with asset variables injected."""
    try:
        return await coordinator.retrieve(content_id)
    except NotFoundError:
        logger.info(f"No content for ID [{content_id}]")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No content for ID [{content_id}]",
        )
    except ContentServiceError as e:
        logger.error(f"Unable to retrieve content [{content_id}]: {e}")
        raise HTTPException(status_code=e.status_code, detail="Unable to retrieve content.")


@router.delete("/content/{content_id:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(
    content_id: str,
    api_key_name: str | None = Depends(require_api_key),
    coordinator: EnvelopeCoordinator = Depends(get_coordinator),
) -> Response:
    """Delete an envelope and its index document."""
    logger.info(f"({api_key_name}) Deleting content with ID [{content_id}]")

    try:
        await coordinator.delete(content_id)
    except ContentServiceError as e:
        logger.error(f"({api_key_name}) Unable to delete content [{content_id}]: {e}")
        raise HTTPException(status_code=e.status_code, detail="Unable to delete content.")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/search")
async def search_content(
    tag: str | None = Query(default=None),
    category: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """List indexed projections, optionally filtered by tag or category."""
    documents = await services.index.search(tag=tag, category=category, limit=limit)
    return {
        "total": len(documents),
        "results": [document.to_document() for document in documents],
    }
