import io
import sys
from functools import partial
from pathlib import Path

import httpx
import pytest

from linxcli import cli
from linxcli.client import LinxClient

DOMAIN = "https://linx.test"


class FakeLinx:
    """In-memory linx server behind httpx.MockTransport"""

    def __init__(self) -> None:
        self.files: dict[str, tuple[bytes, str]] = {}
        self.requests: list[httpx.Request] = []
        self.broken: set[str] = set()
        self.garbled: set[str] = set()
        self.counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "PUT" and path.startswith("/upload/public"):
            return self.upload(request, path.removeprefix("/upload/public").lstrip("/"))
        name = path.lstrip("/")
        if name in self.broken:
            return httpx.Response(500)
        if name not in self.files:
            return httpx.Response(404)
        content, key = self.files[name]
        if request.method == "GET" and name in self.garbled:
            return httpx.Response(200, text="<html>not json</html>")
        if request.method == "GET":
            return httpx.Response(200, json={"filename": name, "size": str(len(content))})
        if request.method == "DELETE":
            if request.headers.get("X-Delete-Key") != key:
                return httpx.Response(401)
            del self.files[name]
            return httpx.Response(200, json={"success": True})
        return httpx.Response(405)

    def upload(self, request: httpx.Request, name: str) -> httpx.Response:
        if name in self.broken:
            return httpx.Response(500)
        self.counter += 1
        if not name or request.headers.get("X-Randomize-Filename") == "true":
            name = f"rand{self.counter}.txt"
        key = f"key{self.counter}"
        self.files[name] = (request.content, key)
        return httpx.Response(
            200,
            json={"url": f"{DOMAIN}/{name}", "filename": name, "delete_key": key},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> FakeLinx:
    return FakeLinx()


@pytest.fixture
def store(tmp_path: Path, monkeypatch) -> Path:
    store_dir = tmp_path / ".linxcli"
    store_dir.mkdir()
    monkeypatch.setenv("LINXCLI_DIR", str(store_dir))
    return store_dir


@pytest.fixture
def linx(server: FakeLinx, store: Path, monkeypatch):
    """Run the command line against the fake server, return the exit status"""
    monkeypatch.setattr(cli, "LinxClient", partial(LinxClient, transport=server.transport))
    monkeypatch.delenv("LINXCLI_LOG_LEVEL", raising=False)

    def run(*args: str, prog="linx") -> int:
        return cli.main(["--api-url", DOMAIN, *args], prog=prog)

    return run


@pytest.fixture
def stdin(monkeypatch):
    def feed(data: bytes) -> None:
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))

    return feed
