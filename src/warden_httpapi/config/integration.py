"""HTTP API 연동 설정과 빌더."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import Callable, ClassVar, Mapping, Optional, Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..clients.http_service import HttpService, HttpxService
from ..data.headers import HeaderMap
from ..exceptions import ConfigurationError, MissingArgumentError
from ..serialization.encoder import DEFAULT_SERIALIZER_OPTIONS, JsonSerializerOptions
from .settings import HttpApiSettings, get_settings

_URL_ADAPTER = TypeAdapter(AnyUrl)

HttpServiceProvider = Callable[[], HttpService]


def _ensure_ascii(argument: str, value: str) -> None:
    if not value.isascii():
        raise ConfigurationError(
            f"Value of '{argument}' must contain only ASCII characters to be sent as an HTTP header."
        )


def _validated_headers(headers: Optional[Mapping[str, str]]) -> HeaderMap:
    validated = HeaderMap(headers)
    for name, value in validated.items():
        _ensure_ascii(name, name)
        _ensure_ascii(name, value)
    return validated


@dataclass(frozen=True, slots=True)
class HttpApiIntegrationConfiguration:
    """빌더로 생성되는 읽기 전용 연동 설정."""

    API_KEY_HEADER: ClassVar[str] = "X-Api-Key"

    uri: AnyUrl
    api_key: Optional[str] = None
    organization_id: Optional[str] = None
    warden_id: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(HeaderMap()))
    timeout: Optional[timedelta] = None
    fail_fast: bool = False
    serializer_options: JsonSerializerOptions = DEFAULT_SERIALIZER_OPTIONS
    http_service_provider: HttpServiceProvider = HttpxService

    @property
    def base_url(self) -> str:
        return str(self.uri)

    @classmethod
    def create(
        cls,
        url: str,
        api_key: Optional[str] = None,
        organization_id: Optional[str] = None,
        warden_id: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "ConfigurationBuilder":
        return ConfigurationBuilder(url, api_key, organization_id, warden_id, headers)

    @classmethod
    def from_settings(cls, settings: Optional[HttpApiSettings] = None) -> "ConfigurationBuilder":
        """환경 설정으로 빌더를 만든다. 타임아웃과 fail-fast 값까지 반영한다."""

        settings = settings or get_settings()
        builder = ConfigurationBuilder(
            settings.url or "",
            settings.api_key,
            settings.organization_id,
            settings.warden_id,
            settings.headers or None,
        )
        if settings.timeout is not None:
            builder.with_timeout(settings.timeout)
        if settings.fail_fast:
            builder.fail_fast()
        return builder


class ConfigurationBuilder:
    """검증된 설정 값을 누적해 ``HttpApiIntegrationConfiguration`` 을 만든다.

    각 설정 메서드는 잘못된 값을 즉시 거부하며 빌더 자신을 반환한다.
    """

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        organization_id: Optional[str] = None,
        warden_id: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        if not url:
            raise ConfigurationError("URL can not be empty.")
        try:
            self._uri = _URL_ADAPTER.validate_python(url)
        except ValidationError as exc:
            raise ConfigurationError(f"URL '{url}' is not a valid absolute URI.") from exc
        self._headers = _validated_headers(headers)
        self._api_key: Optional[str] = None
        if api_key and api_key.strip():
            _ensure_ascii("api_key", api_key)
            self._api_key = api_key
            self._headers[HttpApiIntegrationConfiguration.API_KEY_HEADER] = api_key
        self._organization_id = organization_id
        self._warden_id = warden_id
        self._timeout: Optional[timedelta] = None
        self._fail_fast = False
        self._serializer_options = DEFAULT_SERIALIZER_OPTIONS
        self._http_service_provider: HttpServiceProvider = HttpxService

    def with_timeout(self, timeout: Union[timedelta, float, None]) -> "ConfigurationBuilder":
        """요청 타임아웃을 지정한다. 숫자는 초 단위로 해석한다."""

        if timeout is None:
            raise MissingArgumentError("timeout", "Timeout can not be null.")
        if not isinstance(timeout, timedelta):
            timeout = timedelta(seconds=timeout)
        if timeout == timedelta(0):
            raise ConfigurationError("Timeout can not be equal to zero.")
        self._timeout = timeout
        return self

    def with_headers(self, headers: Optional[Mapping[str, str]]) -> "ConfigurationBuilder":
        """요청 헤더를 통째로 교체한다.

        병합하지 않으므로 생성자에서 추가된 ``X-Api-Key`` 도 함께 사라진다.
        """

        if not headers:
            raise MissingArgumentError("headers", "Request headers can not be empty.")
        self._headers = _validated_headers(headers)
        return self

    def with_serializer_options(self, options: Optional[JsonSerializerOptions]) -> "ConfigurationBuilder":
        if options is None:
            raise MissingArgumentError("options", "JSON serializer options can not be null.")
        self._serializer_options = options
        return self

    def with_http_service_provider(self, provider: Optional[HttpServiceProvider]) -> "ConfigurationBuilder":
        if provider is None:
            raise MissingArgumentError("provider", "HTTP service provider can not be null.")
        self._http_service_provider = provider
        return self

    def fail_fast(self) -> "ConfigurationBuilder":
        self._fail_fast = True
        return self

    def build(self) -> HttpApiIntegrationConfiguration:
        return HttpApiIntegrationConfiguration(
            uri=self._uri,
            api_key=self._api_key,
            organization_id=self._organization_id,
            warden_id=self._warden_id,
            headers=MappingProxyType(self._headers.copy()),
            timeout=self._timeout,
            fail_fast=self._fail_fast,
            serializer_options=self._serializer_options,
            http_service_provider=self._http_service_provider,
        )


__all__ = ["ConfigurationBuilder", "HttpApiIntegrationConfiguration", "HttpServiceProvider"]
