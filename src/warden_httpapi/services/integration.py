"""Warden 결과를 HTTP API 로 전달하는 연동 서비스."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from ..config.integration import ConfigurationBuilder, HttpApiIntegrationConfiguration
from ..config.settings import HttpApiSettings
from ..data.models import WardenCheckResultLike, WardenIterationLike
from ..exceptions import InvalidArgumentError, MissingArgumentError
from ..logging import get_logger
from ..serialization.encoder import to_json

log = get_logger(__name__)


def get_full_url(base_url: str, endpoint: Optional[str]) -> str:
    """기본 URL 과 엔드포인트 사이에 슬래시가 정확히 하나 오도록 합친다."""

    if not endpoint or not endpoint.strip():
        return base_url
    if base_url.endswith("/"):
        return f"{base_url}{endpoint[1:] if endpoint.startswith('/') else endpoint}"
    return f"{base_url}{endpoint if endpoint.startswith('/') else f'/{endpoint}'}"


def encode_path_segment(value: str) -> str:
    """공백만 ``%20`` 으로 바꾼다. 다른 문자는 그대로 둔다."""

    return value.replace(" ", "%20")


def _read(source: Any, name: str, alias: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, source.get(alias))
    return getattr(source, name, None)


class HttpApiIntegration:
    """설정된 HTTP API 로 JSON 페이로드를 POST 한다.

    요청 하나당 설정의 provider 로 전송 계층을 얻어 한 번만 전송한다. 재시도는 하지 않는다.
    ``fail_fast`` 가 꺼져 있으면(기본값) 전송 실패는 호출자에게 드러나지 않는다.
    """

    def __init__(self, configuration: Optional[HttpApiIntegrationConfiguration]) -> None:
        if configuration is None:
            raise MissingArgumentError(
                "configuration", "HTTP API Integration configuration has not been provided."
            )
        self._configuration = configuration

    @property
    def configuration(self) -> HttpApiIntegrationConfiguration:
        return self._configuration

    async def post(self, data: Any, endpoint: str = "") -> None:
        """``data`` 를 직렬화해 기본 URL(또는 ``endpoint`` 를 붙인 URL)로 전송한다."""

        await self._send(endpoint, data)

    async def post_iteration_to_panel(self, iteration: Optional[WardenIterationLike]) -> None:
        """Warden 이터레이션을 ``organizations/{id}/wardens/{name}/iterations`` 로 전송한다."""

        if iteration is None:
            raise MissingArgumentError("iteration", "Warden iteration can not be null.")
        warden_name = _read(iteration, "warden_name", "wardenName")
        if not warden_name or not str(warden_name).strip():
            raise InvalidArgumentError("warden_name", "Warden name can not be empty.")

        endpoint = self._iterations_endpoint(encode_path_segment(str(warden_name)))
        await self._send(endpoint, iteration)

    async def post_check_result_to_panel(self, check_result: Optional[WardenCheckResultLike]) -> None:
        """체크 결과를 ``{"check": ...}`` 로 감싸 ``organizations/{id}/wardens/{id}/checks`` 로 전송한다."""

        if check_result is None:
            raise MissingArgumentError("check_result", "Warden check result can not be null.")
        watcher_result = _read(check_result, "watcher_check_result", "watcherCheckResult")
        watcher_name = _read(watcher_result, "watcher_name", "watcherName") if watcher_result is not None else None
        if not watcher_name or not str(watcher_name).strip():
            raise InvalidArgumentError("watcher_name", "Watcher name can not be empty.")

        await self._send(self._checks_endpoint(), {"check": check_result})

    def _iterations_endpoint(self, warden_name: str) -> str:
        organization_id = self._configuration.organization_id or ""
        return f"organizations/{organization_id}/wardens/{warden_name}/iterations"

    def _checks_endpoint(self) -> str:
        organization_id = self._configuration.organization_id or ""
        warden_id = self._configuration.warden_id or ""
        return f"organizations/{organization_id}/wardens/{warden_id}/checks"

    async def _send(self, endpoint: str, data: Any) -> None:
        configuration = self._configuration
        url = get_full_url(configuration.base_url, endpoint)
        body = to_json(data, configuration.serializer_options)
        log.debug("http_api_post", url=url, fail_fast=configuration.fail_fast)
        service = configuration.http_service_provider()
        await service.post(
            url,
            body,
            configuration.headers,
            configuration.timeout,
            configuration.fail_fast,
        )

    @classmethod
    def create(
        cls,
        url: str,
        api_key: Optional[str] = None,
        organization_id: Optional[str] = None,
        warden_id: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        configurator: Optional[Callable[[ConfigurationBuilder], Any]] = None,
    ) -> "HttpApiIntegration":
        """빌더로 설정을 만들고 ``configurator`` 로 추가 설정을 적용한 뒤 연동 객체를 반환한다."""

        builder = HttpApiIntegrationConfiguration.create(url, api_key, organization_id, warden_id, headers)
        if configurator is not None:
            configurator(builder)
        return cls(builder.build())

    @classmethod
    def from_settings(cls, settings: Optional[HttpApiSettings] = None) -> "HttpApiIntegration":
        return cls(HttpApiIntegrationConfiguration.from_settings(settings).build())


__all__ = ["HttpApiIntegration", "encode_path_segment", "get_full_url"]
