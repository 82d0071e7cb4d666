"""HTTP POST 전송 계층."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping, Optional, Protocol, Union

import httpx

from ..data.headers import HeaderMap
from ..exceptions import HttpApiError
from ..logging import get_logger

log = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _encode_body(data: str) -> bytes:
    """짝이 없는 서로게이트는 U+FFFD 로 바꿔 UTF-8 로 인코딩한다."""

    return data.encode("utf-16", "surrogatepass").decode("utf-16", "replace").encode("utf-8")


class HttpService(Protocol):
    """JSON 문자열 한 건을 POST 로 전송하는 전송 계층."""

    async def post(
        self,
        url: str,
        data: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[timedelta] = None,
        fail_fast: bool = False,
    ) -> None: ...


class HttpxService:
    """httpx 기반 기본 전송 구현.

    ``client`` 를 넘기지 않으면 호출마다 짧게 쓰고 닫는 ``AsyncClient`` 를 연다.
    넘겨받은 클라이언트는 재사용하며 닫지 않는다. 헤더와 타임아웃은 요청 단위로만 적용하므로
    공유 클라이언트의 기본 상태를 바꾸지 않는다.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client

    async def post(
        self,
        url: str,
        data: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[timedelta] = None,
        fail_fast: bool = False,
    ) -> None:
        """JSON 본문을 POST 로 전송한다.

        실패 응답이나 전송 오류(네트워크, 헤더 인코딩)는 ``fail_fast`` 가 켜져 있을 때만 ``HttpApiError`` 로 전달되고,
        그렇지 않으면 경고 로그만 남긴다.
        """

        request_headers = self._build_headers(headers)
        request_timeout = self._resolve_timeout(timeout)
        try:
            if self._client is None:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, url, data, request_headers, request_timeout)
            else:
                response = await self._send(self._client, url, data, request_headers, request_timeout)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            log.warning(
                "http_api_request_failed",
                url=url,
                error=str(exc),
                error_type=type(exc).__name__,
                fail_fast=fail_fast,
            )
            if not fail_fast:
                return
            raise HttpApiError(f"There was an error while executing the POST request: {exc!r}") from exc

        if response.is_success:
            log.debug("http_api_request_sent", url=url, status_code=response.status_code)
            return

        log.warning(
            "http_api_invalid_response",
            url=url,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            fail_fast=fail_fast,
        )
        if not fail_fast:
            return
        raise HttpApiError(
            f"Received invalid HTTP response with status code: {response.status_code}. "
            f"Reason phrase: {response.reason_phrase}",
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
        )

    @staticmethod
    async def _send(
        client: httpx.AsyncClient,
        url: str,
        data: str,
        headers: HeaderMap,
        timeout: Union[httpx.Timeout, Any],
    ) -> httpx.Response:
        return await client.post(url, content=_encode_body(data), headers=headers, timeout=timeout)

    @staticmethod
    def _build_headers(headers: Optional[Mapping[str, str]]) -> HeaderMap:
        request_headers = HeaderMap(headers)
        request_headers["Content-Type"] = JSON_CONTENT_TYPE
        return request_headers

    @staticmethod
    def _resolve_timeout(timeout: Optional[timedelta]) -> Union[httpx.Timeout, Any]:
        if timeout is not None and timeout.total_seconds() > 0:
            return httpx.Timeout(timeout.total_seconds())
        return httpx.USE_CLIENT_DEFAULT


__all__ = ["HttpService", "HttpxService", "JSON_CONTENT_TYPE"]
