import httpx

from app.utils.config import Settings


def create_http_client(settings: Settings, **kwargs) -> httpx.AsyncClient:
    """
    Builds the client used for GitHub and webhook calls.

    Redirects are followed because Apps Script web apps answer a POST with a
    302 to the script output.
    """
    return httpx.AsyncClient(
        follow_redirects=True, timeout=settings.http_timeout, **kwargs
    )
