"""Asset API endpoints.

Endpoints:
    POST /api/v1/assets - Fingerprint and publish uploaded files

Every file field of the multipart body is treated as one asset. The response
maps each file's original name to its public URL. Pass ``named=true`` to
also register the names in the asset directory so they are injected into
retrieved envelopes.

Tests:
    - tests/integration/test_api_assets.py
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from content_service.auth import require_api_key
from content_service.core.assets import Asset, AssetPipeline
from content_service.dependencies import get_pipeline
from content_service.errors import ContentServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post("")
async def accept_assets(
    request: Request,
    named: bool = Query(default=False, description="Register names in the asset directory"),
    api_key_name: str | None = Depends(require_api_key),
    pipeline: AssetPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Fingerprint and upload static assets."""
    form = await request.form()
    assets = [
        Asset(
            original_name=value.filename or field,
            content_type=value.content_type,
            stream=value,
        )
        for field, value in form.multi_items()
        if isinstance(value, UploadFile)
    ]

    logger.info(f"({api_key_name}) Accepting {len(assets)} assets (named={named})")

    try:
        summary = await pipeline.accept(assets, named=named)
    except ContentServiceError as e:
        logger.error(f"({api_key_name}) Unable to process an asset: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Unable to upload one or more assets!"},
        )
    finally:
        await form.close()

    return JSONResponse(status_code=status.HTTP_200_OK, content=summary)
