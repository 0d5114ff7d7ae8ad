import logging
from typing import Optional, Tuple

import httpx

from app.schemas.upload import ExistenceCheck, StoredFile
from app.utils.config import Settings


class GitHubAPIError(RuntimeError):
    """Raised when GitHub rejects a repository or file write."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def github_headers(settings: Settings, include_content_type: bool = False) -> dict:
    headers = {
        "Authorization": f"token {settings.github_token}",
        "User-Agent": settings.github_user_agent,
        "Accept": "application/vnd.github.v3+json",
    }
    if include_content_type:
        headers["Content-Type"] = "application/json"
    return headers


def _api_url(settings: Settings, path: str) -> str:
    return f"{settings.github_api_base_url.rstrip('/')}/{path.lstrip('/')}"


async def check_repository(
    client: httpx.AsyncClient, settings: Settings, owner: str, name: str
) -> ExistenceCheck:
    try:
        response = await client.get(
            _api_url(settings, f"repos/{owner}/{name}"),
            headers=github_headers(settings),
        )
    except httpx.HTTPError as e:
        logging.warning(f"⚠️ Could not check repo {owner}/{name}: {e}")
        return ExistenceCheck.CHECK_FAILED
    if response.is_success:
        return ExistenceCheck.EXISTS
    return ExistenceCheck.ABSENT


async def ensure_repository(
    client: httpx.AsyncClient, settings: Settings, owner: str, name: str
) -> ExistenceCheck:
    """
    Makes sure `owner/name` exists, creating it under the authenticated user if not.

    A failed existence check is indistinguishable from a missing repo here: both
    fall through to creation, so a GitHub outage surfaces as a create error.

    Returns:
        The result of the existence check that preceded any creation.
    """
    state = await check_repository(client, settings, owner, name)
    if state is ExistenceCheck.EXISTS:
        logging.info(f"✓ Repo {name} exists")
        return state

    logging.info(f"Creating repo: {name}")
    response = await client.post(
        _api_url(settings, "user/repos"),
        headers=github_headers(settings, include_content_type=True),
        json={
            "name": name,
            "private": False,
            "description": f"{settings.repo_description_label} Class {name.upper()}",
            "auto_init": True,
        },
    )
    if not response.is_success:
        try:
            detail = response.json().get("message")
        except (ValueError, AttributeError):
            detail = response.text
        raise GitHubAPIError(
            f"Failed to create repo {name}: {detail}",
            status_code=response.status_code,
            body=response.text,
        )

    logging.info(f"✓ Repo {name} created")
    return state


async def get_file_sha(
    client: httpx.AsyncClient,
    settings: Settings,
    owner: str,
    repo: str,
    path: str,
) -> Tuple[ExistenceCheck, Optional[str]]:
    file_url = _api_url(settings, f"repos/{owner}/{repo}/contents/{path}")
    try:
        response = await client.get(file_url, headers=github_headers(settings))
    except httpx.HTTPError as e:
        logging.info(f"Error checking file: {e}")
        return ExistenceCheck.CHECK_FAILED, None

    if response.is_success:
        try:
            data = response.json()
        except ValueError as e:
            logging.info(f"Error checking file: {e}")
            return ExistenceCheck.CHECK_FAILED, None
        # A directory listing comes back as a JSON array and has no sha.
        sha = data.get("sha") if isinstance(data, dict) else None
        logging.info("✓ File EXISTS, will UPDATE")
        return ExistenceCheck.EXISTS, sha
    if response.status_code == 404:
        logging.info("✓ File NOT FOUND, will CREATE")
    return ExistenceCheck.ABSENT, None


async def upload_file(
    client: httpx.AsyncClient,
    settings: Settings,
    owner: str,
    repo: str,
    path: str,
    content: str,
    message: str,
) -> StoredFile:
    """Creates `path` in the repo, or updates it in place when it already exists."""
    file_url = _api_url(settings, f"repos/{owner}/{repo}/contents/{path}")
    logging.info(f"📤 Uploading to {file_url}")

    _, sha = await get_file_sha(client, settings, owner, repo, path)

    upload_data = {
        "message": message,
        "content": content,
        "branch": settings.github_branch,
    }
    if sha:
        upload_data["sha"] = sha

    response = await client.put(
        file_url,
        headers=github_headers(settings, include_content_type=True),
        json=upload_data,
    )
    if not response.is_success:
        # The body is kept on the exception but not surfaced to the caller.
        logging.error(
            f"❌ GitHub rejected {path} with {response.status_code}: {response.text}"
        )
        raise GitHubAPIError(
            f"GitHub API error: {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    result = response.json()["content"]
    return StoredFile(url=result.get("html_url"), sha=result.get("sha"), path=path)
