import base64
import logging
from typing import Any

import httpx

from app.schemas.upload import WebhookPayload


async def forward_answer_key(
    client: httpx.AsyncClient, url: str, class_label: str, date: str, content: str
) -> Any:
    """
    Sends the decoded answer key to the document webhook.

    Best effort: any failure is logged and reported as None so the upload
    itself still succeeds.
    """
    try:
        decoded = base64.b64decode(content, validate=True).decode("utf-8")
        payload = WebhookPayload(class_name=class_label, date=date, content=decoded)
        response = await client.post(url, json=payload.model_dump(by_alias=True))
        drive_result = response.json()
    except Exception as e:
        logging.error(f"❌ Google Drive upload failed: {e}")
        return None

    success = drive_result.get("success") if isinstance(drive_result, dict) else None
    logging.info(f"Google Drive PDF created: {success}")
    return drive_result
