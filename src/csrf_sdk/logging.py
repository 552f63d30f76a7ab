"""CSRF 보안 이벤트용 structlog 설정.

거부된 요청의 감사 기록을 남기되 토큰 값은 어떤 경로로도 기록하지 않습니다.
라이브러리는 ``get_logger``로 로거만 얻으며, 출력 형식은 호스트 애플리케이션이
``configure_logging``으로 정합니다.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from csrf_sdk.utils import get_client_info

SENSITIVE_FIELDS = {"token", "secret", "cookie", "candidate", "password"}
MASK = "***MASKED***"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """이벤트에 ``component=csrf-sdk``를 붙입니다 (호출자가 지정한 값은 유지)."""
    event_dict.setdefault("component", "csrf-sdk")
    return event_dict


def mask_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """키 이름에 token/cookie/candidate 등이 포함된 필드 값을 가립니다."""
    for key in event_dict:
        if any(sensitive in key.lower() for sensitive in SENSITIVE_FIELDS):
            event_dict[key] = MASK
    return event_dict


def _renderer(env: str) -> list[Processor]:
    if env == "development":
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(env: str = "development") -> None:
    """호스트 애플리케이션의 structlog 파이프라인을 구성합니다.

    ``development``에서는 DEBUG 레벨 콘솔 출력, 그 외 환경에서는 INFO 레벨 JSON 출력입니다.
    마스킹 프로세서는 렌더러보다 앞에 위치합니다.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if env == "development" else logging.INFO,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        mask_sensitive_data,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        *_renderer(env),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class SecurityLogger:
    """토큰 발급과 검증 결과를 ``csrf.security`` 로거로 기록합니다."""

    def __init__(self) -> None:
        self.logger = get_logger("csrf.security")

    def log_token_issued(self, path: str) -> None:
        """Log issuance of a fresh token cookie (value is never logged)."""
        self.logger.debug("csrf_token_issued", event_type="csrf", path=path)

    def log_verification_failed(self, request: Any, reason: str) -> None:
        """Log a rejected state-changing request for audit.

        Args:
            request: Starlette/FastAPI request object
            reason: Verification outcome (missing_candidate, mismatch)
        """
        ip_address, user_agent = get_client_info(request)
        self.logger.warning(
            "csrf_verification_failed",
            event_type="csrf",
            reason=reason,
            method=request.method,
            path=request.url.path,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    def log_verification_succeeded(self, request: Any) -> None:
        self.logger.debug(
            "csrf_verification_succeeded",
            event_type="csrf",
            method=request.method,
            path=request.url.path,
        )


security_logger = SecurityLogger()
