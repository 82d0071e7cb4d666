"""HTTP API 연동 예외 정의."""

from __future__ import annotations

from typing import Optional


class HttpApiIntegrationError(Exception):
    """HTTP API 연동 모듈의 최상위 예외."""


class ConfigurationError(HttpApiIntegrationError, ValueError):
    """설정 값이 올바르지 않을 때 발생."""


class MissingArgumentError(HttpApiIntegrationError, ValueError):
    """필수 인자가 없거나 비어 있을 때 발생."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"{message} (argument: {argument})")


class InvalidArgumentError(HttpApiIntegrationError, ValueError):
    """인자 값은 있으나 사용할 수 없는 값일 때 발생."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(f"{message} (argument: {argument})")


class HttpApiError(HttpApiIntegrationError, RuntimeError):
    """fail-fast 모드에서 POST 요청이 실패했을 때 발생."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        reason_phrase: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "HttpApiError",
    "HttpApiIntegrationError",
    "InvalidArgumentError",
    "MissingArgumentError",
]
