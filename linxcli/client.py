from __future__ import annotations

from typing import Any, NamedTuple
from urllib.parse import quote

import httpx

from .config import AGENT, DEFAULT_API_URL, TIMEOUT
from .exceptions import (
    ConnectionError,
    DataError,
    InvalidResponse,
    MalformedResponse,
    ResponseError,
)
from .utils import appromix, logger


class UploadResult(NamedTuple):
    url: str
    filename: str
    delete_key: str

    @property
    def record(self) -> str:
        """Line stored in the delete_keys file: 'filename/delete_key'"""
        return f"{self.filename}/{self.delete_key}"


class BaseClient:
    """Request construction and response parsing shared by the sync and async
    clients. No request is ever retried."""

    def __init__(self, api_url: str = DEFAULT_API_URL) -> None:
        self.api_url = api_url.rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": f"{AGENT} python-httpx/{httpx.__version__}",
            "Accept": "application/json",
        }

    def _build_url(self, filename: str | None = None, upload=False) -> str:
        url = self.api_url
        if upload:
            url += "/upload/public"
        if filename is not None:
            url += "/" + quote(filename, safe="")
        return url

    @staticmethod
    def _upload_headers(
        expires: int | None = None, randomize=False, barename_randomize=False
    ) -> dict[str, str]:
        # Possibly invalid or conflicting values are left for the server to
        # judge, so that changes to their meaning need no client update.
        headers = {}
        if expires is not None:
            headers["X-Set-Expiry"] = str(expires)
        if randomize:
            headers["X-Randomize-Filename"] = "true"
        if barename_randomize:
            headers["X-Randomize-Barename"] = "true"
        return headers

    @staticmethod
    def _check_content(content: bytes, filename: str | None) -> None:
        if not content:
            raise DataError(f'No data to upload for "{filename or "stdin"}"')
        logger.debug(f"Uploading {appromix(len(content))} as {filename or '-'}")

    @staticmethod
    def _check_status(r: httpx.Response) -> None:
        if not r.is_success:
            raise ResponseError(f"{r.status_code} {r.reason_phrase}")

    @staticmethod
    def _parse_json(r: httpx.Response, filename: str | None) -> dict[str, Any]:
        try:
            data = r.json()
        except ValueError as e:
            raise InvalidResponse(
                f'Server returned invalid JSON for file "{filename or "stdin"}"'
            ) from e
        if not isinstance(data, dict):
            raise MalformedResponse(
                f'Server returned a malformed response for file "{filename or "stdin"}"'
            )
        return data

    def _parse_upload(self, r: httpx.Response, filename: str | None) -> UploadResult:
        self._check_status(r)
        data = self._parse_json(r, filename)
        fields = UploadResult._fields
        if missing := [k for k in fields if not isinstance(data.get(k), str)]:
            raise MalformedResponse(
                f"Server response for file \"{filename or 'stdin'}\" "
                f"lacks {', '.join(missing)}"
            )
        return UploadResult(*(data[k] for k in fields))

    def _parse_info(self, r: httpx.Response, filename: str) -> dict[str, Any]:
        self._check_status(r)
        return self._parse_json(r, filename)

    @staticmethod
    def _transport_error(method: str, url: str, e: Exception) -> ConnectionError:
        logger.debug(f"{method} {url} failed: {e!r}")
        return ConnectionError(f"{method} {url} failed: {e}")


class LinxClient(BaseClient):
    """
    Synchronous client of the linx file hosting API.

    Example::
    ```py
    from pathlib import Path
    from linxcli import LinxClient

    with LinxClient("https://linx.li") as client:
        ret = client.upload(Path("a.txt").read_bytes(), "a.txt")
        print(ret.url)
        client.delete(ret.filename, ret.delete_key)
    ```
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(api_url)
        self._client = httpx.Client(
            headers=self.headers, timeout=TIMEOUT, transport=transport
        )

    def __enter__(self) -> LinxClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise self._transport_error(method, url, e) from e

    def upload(
        self,
        content: bytes,
        filename: str | None = None,
        expires: int | None = None,
        randomize=False,
        barename_randomize=False,
    ) -> UploadResult:
        """Upload file content, if success return url, filename and delete key

        :param content: bytes type of file content
        :param filename: remote name, the server picks one if None
        :param expires: seconds from now until the file becomes unavailable
        :param randomize: ask the server to randomize the filename
        :param barename_randomize: randomize the filename but keep its extension
        """
        self._check_content(content, filename)
        url = self._build_url(filename, upload=True)
        headers = self._upload_headers(expires, randomize, barename_randomize)
        r = self._request("PUT", url, content=content, headers=headers)
        return self._parse_upload(r, filename)

    def info(self, filename: str) -> dict[str, Any]:
        """Get the metadata of a hosted file as a flat dict"""
        r = self._request("GET", self._build_url(filename), follow_redirects=True)
        return self._parse_info(r, filename)

    def delete(self, filename: str, delete_key: str) -> None:
        r = self._request(
            "DELETE", self._build_url(filename), headers={"X-Delete-Key": delete_key}
        )
        self._check_status(r)


class AsyncLinxClient(BaseClient):
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(api_url)
        self._client = httpx.AsyncClient(
            headers=self.headers, timeout=TIMEOUT, transport=transport
        )

    async def __aenter__(self) -> AsyncLinxClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise self._transport_error(method, url, e) from e

    async def upload(
        self,
        content: bytes,
        filename: str | None = None,
        expires: int | None = None,
        randomize=False,
        barename_randomize=False,
    ) -> UploadResult:
        self._check_content(content, filename)
        url = self._build_url(filename, upload=True)
        headers = self._upload_headers(expires, randomize, barename_randomize)
        r = await self._request("PUT", url, content=content, headers=headers)
        return self._parse_upload(r, filename)

    async def info(self, filename: str) -> dict[str, Any]:
        url = self._build_url(filename)
        r = await self._request("GET", url, follow_redirects=True)
        return self._parse_info(r, filename)

    async def delete(self, filename: str, delete_key: str) -> None:
        r = await self._request(
            "DELETE", self._build_url(filename), headers={"X-Delete-Key": delete_key}
        )
        self._check_status(r)

    upload.__doc__ = LinxClient.upload.__doc__
