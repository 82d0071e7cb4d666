"""Warden 패널로 전송하는 결과 모델."""

from __future__ import annotations

import traceback
from datetime import datetime, timedelta
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class WatcherResultLike(Protocol):
    watcher_name: str


class WardenCheckResultLike(Protocol):
    """패널 전송에 필요한 최소한의 체크 결과 형태."""

    watcher_check_result: WatcherResultLike


class WardenIterationLike(Protocol):
    """패널 전송에 필요한 최소한의 이터레이션 형태."""

    warden_name: str


class _PanelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExceptionInfo(_PanelModel):
    """체크 도중 발생한 예외 정보."""

    message: Optional[str] = None
    source: Optional[str] = None
    stack_trace: Optional[str] = None
    inner_exception: Optional["ExceptionInfo"] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionInfo":
        inner = exc.__cause__ or exc.__context__
        return cls(
            message=str(exc),
            source=type(exc).__module__,
            stack_trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            inner_exception=cls.from_exception(inner) if inner is not None else None,
        )


class WatcherCheckResult(_PanelModel):
    """개별 watcher 의 검사 결과."""

    watcher_name: str
    watcher_type: Optional[str] = None
    description: Optional[str] = None
    is_valid: bool = False


class WardenCheckResult(_PanelModel):
    """watcher 검사 결과와 실행 시각을 묶은 체크 결과."""

    watcher_check_result: WatcherCheckResult
    started_at: datetime
    completed_at: datetime
    exception: Optional[ExceptionInfo] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return self.watcher_check_result.is_valid

    @computed_field  # type: ignore[prop-decorator]
    @property
    def execution_time(self) -> timedelta:
        return self.completed_at - self.started_at


class WardenIteration(_PanelModel):
    """Warden 한 회차 실행에서 수집된 체크 결과 모음."""

    warden_name: str
    ordinal: int = 0
    started_at: datetime
    completed_at: datetime
    results: List[WardenCheckResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def execution_time(self) -> timedelta:
        return self.completed_at - self.started_at


__all__ = [
    "ExceptionInfo",
    "WardenCheckResult",
    "WardenCheckResultLike",
    "WardenIteration",
    "WardenIterationLike",
    "WatcherCheckResult",
    "WatcherResultLike",
]
