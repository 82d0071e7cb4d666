"""Warden 결과를 HTTP API 로 전달하는 연동 패키지."""

from .clients.http_service import HttpService, HttpxService  # noqa: F401
from .config.integration import ConfigurationBuilder, HttpApiIntegrationConfiguration  # noqa: F401
from .config.settings import HttpApiSettings, get_settings  # noqa: F401
from .data import (  # noqa: F401
    ExceptionInfo,
    HeaderMap,
    WardenCheckResult,
    WardenIteration,
    WatcherCheckResult,
)
from .exceptions import (  # noqa: F401
    ConfigurationError,
    HttpApiError,
    HttpApiIntegrationError,
    InvalidArgumentError,
    MissingArgumentError,
)
from .logging import configure_logging, get_logger  # noqa: F401
from .serialization.encoder import (  # noqa: F401
    DEFAULT_SERIALIZER_OPTIONS,
    JsonSerializerOptions,
    from_json,
    to_json,
)
from .services.integration import HttpApiIntegration, get_full_url  # noqa: F401

__all__ = [
    "ConfigurationBuilder",
    "ConfigurationError",
    "DEFAULT_SERIALIZER_OPTIONS",
    "ExceptionInfo",
    "HeaderMap",
    "HttpApiError",
    "HttpApiIntegration",
    "HttpApiIntegrationConfiguration",
    "HttpApiIntegrationError",
    "HttpApiSettings",
    "HttpService",
    "HttpxService",
    "InvalidArgumentError",
    "JsonSerializerOptions",
    "MissingArgumentError",
    "WardenCheckResult",
    "WardenIteration",
    "WatcherCheckResult",
    "configure_logging",
    "from_json",
    "get_full_url",
    "get_logger",
    "get_settings",
    "to_json",
]
