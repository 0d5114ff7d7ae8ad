import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from app.utils.config import Settings
from app.utils.http_client import create_http_client


API = "https://api.github.test"


class FakeGitHub:
    """In-memory stand-in for the GitHub contents API plus the webhook."""

    def __init__(self):
        self.repos: set = set()
        self.files: Dict[Tuple[str, str], str] = {}
        self.requests: List[httpx.Request] = []
        self.create_repo_error: Optional[Dict] = None
        self.webhook_handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"success": True, "pdf": "x.pdf"})
        )

    def bodies(self, method: str, path_prefix: str = "") -> List[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.url.path.startswith(path_prefix)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host != httpx.URL(API).host:
            return self.webhook_handler(request)

        parts = request.url.path.strip("/").split("/")
        if request.method == "POST" and parts == ["user", "repos"]:
            if self.create_repo_error is not None:
                return httpx.Response(422, json=self.create_repo_error)
            name = json.loads(request.content)["name"]
            self.repos.add(name)
            return httpx.Response(201, json={"name": name})

        if parts[0] == "repos" and len(parts) == 3:
            if request.method == "GET" and parts[2] in self.repos:
                return httpx.Response(200, json={"name": parts[2]})
            return httpx.Response(404, json={"message": "Not Found"})

        if parts[0] == "repos" and len(parts) > 4 and parts[3] == "contents":
            key = (parts[2], "/".join(parts[4:]))
            if request.method == "GET":
                if key in self.files:
                    return httpx.Response(200, json={"sha": self.files[key]})
                return httpx.Response(404, json={"message": "Not Found"})
            if request.method == "PUT":
                body = json.loads(request.content)
                if key in self.files and body.get("sha") != self.files[key]:
                    return httpx.Response(409, json={"message": "sha mismatch"})
                sha = f"sha-{len(self.requests)}"
                self.files[key] = sha
                return httpx.Response(
                    201 if "sha" not in body else 200,
                    json={
                        "content": {
                            "html_url": f"https://github.test/{parts[1]}/{key[0]}/blob/main/{key[1]}",
                            "sha": sha,
                        }
                    },
                )

        return httpx.Response(500, json={"message": "unexpected request"})


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def settings():
    return Settings(
        github_token="test-token",
        github_user="teacher",
        github_api_base_url=API,
        google_script_url="",
    )


@pytest.fixture
def make_client(github, settings):
    def _make():
        return create_http_client(
            settings, transport=httpx.MockTransport(github.handler)
        )

    return _make
