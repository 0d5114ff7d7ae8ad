import logging

import httpx

from app.schemas.upload import UploadRequest, UploadResult
from app.services.upload.github_utils import ensure_repository, upload_file
from app.services.upload.webhook_utils import forward_answer_key
from app.utils.config import Settings


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing."""


class UploadValidationError(ValueError):
    """Raised when the submitted form is missing a required field."""


def answer_key_path(date: str) -> str:
    return f"answers/answer-key-{date}.txt"


def question_path(filename: str) -> str:
    return f"questions/{filename}"


async def process_upload(
    request: UploadRequest,
    settings: Settings,
    client: httpx.AsyncClient,
) -> UploadResult:
    """
    Upload workflow:
    - Makes sure the class repository exists.
    - Writes the question or answer key into it (create or update).
    - For answer keys, forwards the decoded text to the document webhook if one
      is configured.
    """
    if not settings.github_token:
        raise ConfigurationError("No GitHub token")
    if not request.is_answer and not request.filename:
        raise UploadValidationError("Missing required field: filename")

    owner = settings.github_user
    repo = request.class_id
    class_label = request.class_label

    logging.info("=== UPLOAD START ===")
    logging.info(f"Class: {repo}, Type: {request.kind}, Date: {request.date}")

    await ensure_repository(client, settings, owner, repo)

    drive_result = None
    if request.is_answer:
        github_result = await upload_file(
            client,
            settings,
            owner,
            repo,
            answer_key_path(request.date),
            request.content,
            f"Add answer key for {class_label} - {request.date}",
        )
        if settings.google_script_url:
            drive_result = await forward_answer_key(
                client,
                settings.google_script_url,
                class_label,
                request.date,
                request.content,
            )
    else:
        github_result = await upload_file(
            client,
            settings,
            owner,
            repo,
            question_path(request.filename),
            request.content,
            f"Add question: {request.filename} to {class_label}",
        )

    logging.info("=== UPLOAD SUCCESS ===")
    return UploadResult(
        message=f"Uploaded to {class_label}",
        github=github_result,
        drive=drive_result,
    )
