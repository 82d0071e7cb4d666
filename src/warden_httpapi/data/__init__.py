"""데이터 모델 서브패키지."""

from .headers import HeaderMap
from .models import (
    ExceptionInfo,
    WardenCheckResult,
    WardenCheckResultLike,
    WardenIteration,
    WardenIterationLike,
    WatcherCheckResult,
    WatcherResultLike,
)

__all__ = [
    "ExceptionInfo",
    "HeaderMap",
    "WardenCheckResult",
    "WardenCheckResultLike",
    "WardenIteration",
    "WardenIterationLike",
    "WatcherCheckResult",
    "WatcherResultLike",
]
