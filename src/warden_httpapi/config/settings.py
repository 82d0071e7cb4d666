"""환경 변수 기반 연동 설정 로더."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpApiSettings(BaseSettings):
    """``WARDEN_HTTPAPI_`` 접두사 환경 변수에서 읽는 연동 설정."""

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_HTTPAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: Optional[str] = Field(
        default=None,
        description="HTTP API 기본 URL",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="X-Api-Key 헤더로 전송할 API Key",
    )
    organization_id: Optional[str] = Field(
        default=None,
        description="Warden 패널 조직 ID",
    )
    warden_id: Optional[str] = Field(
        default=None,
        description="Warden 패널 warden ID",
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="추가 요청 헤더 (JSON 객체)",
    )
    timeout: Optional[float] = Field(
        default=None,
        description="요청 타임아웃(초)",
        gt=0,
    )
    fail_fast: bool = Field(
        default=False,
        description="전송 실패 시 예외 발생 여부",
    )


@lru_cache(maxsize=1)
def get_settings() -> HttpApiSettings:
    """싱글턴 형태로 설정을 반환한다."""

    return HttpApiSettings()


__all__ = ["HttpApiSettings", "get_settings"]
