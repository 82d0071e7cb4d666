"""structlog 기반 로깅 설정."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.stdlib import BoundLogger

_PACKAGE_LOGGER = "warden_httpapi"

logging.getLogger(_PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(level: str = "INFO", *, json_format: bool = False) -> None:
    """표준 logging 핸들러와 structlog 프로세서 체인을 구성한다.

    라이브러리 자체는 이 함수를 호출하지 않는다. 애플리케이션 진입점에서 한 번 호출한다.
    """

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    renderer = structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> BoundLogger:
    """표준 logging 로거를 감싼 structlog 로거를 돌려준다.

    출력 여부는 표준 logging 의 레벨과 핸들러를 따르므로, 애플리케이션이 로깅을 구성하지 않으면
    아무것도 출력하지 않는다. 프로세서는 호출 시점의 structlog 설정을 사용한다.
    """

    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=BoundLogger)


__all__ = ["configure_logging", "get_logger"]
