import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import httpx
from fastapi import APIRouter, Depends, Form

from app.schemas.upload import UploadRequest
from app.services.upload.orchestrator import UploadValidationError, process_upload
from app.utils.config import Settings, get_settings
from app.utils.http_client import create_http_client
from app.utils.responses import error_response, success_response


router = APIRouter(prefix="/api", tags=["upload"])


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with create_http_client(settings) as client:
        yield client


def today_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()


@router.post("/upload")
async def handle_upload(
    class_id: Optional[str] = Form(None, alias="class"),
    filename: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    kind: Optional[str] = Form(None, alias="type"),
    date: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Stores a question or answer key in the class repository."""
    try:
        if not class_id:
            raise UploadValidationError("Missing required field: class")
        if not content:
            raise UploadValidationError("Missing required field: content")

        request = UploadRequest(
            class_id=class_id,
            kind=kind or "question",
            filename=filename,
            content=content,
            date=date or today_utc(),
        )
        result = await process_upload(request, settings, client)
        return success_response(result.model_dump())
    except Exception as e:
        logging.error("=== UPLOAD ERROR ===")
        logging.error(f"❌ Upload failed: {e}", exc_info=True)
        return error_response(str(e))
