"""csrf-sdk: Double Submit Cookie 패턴 기반 CSRF 보호 SDK.

FastAPI/Starlette 애플리케이션에 CSRF 보호를 추가하기 위한 SDK입니다.
토큰 발급 미들웨어, 요청 단위 컨텍스트, 의존성 주입 헬퍼를 제공합니다.

주요 구성 요소:
    - CSRFMiddleware: 토큰 쿠키 보장 및 전역 검증 미들웨어
    - CSRFConfig: CSRF 설정 관리
    - CSRFContext: 요청 단위 토큰 접근자
    - get_csrf_context, require_csrf_token: FastAPI 의존성 주입 헬퍼
    - CSRFClient: 토큰 인식 HTTP 클라이언트

Example:
    >>> from fastapi import FastAPI, Depends
    >>> from csrf_sdk import CSRFConfig, CSRFContext, CSRFMiddleware, get_csrf_context
    >>>
    >>> app = FastAPI()
    >>> app.add_middleware(CSRFMiddleware, config=CSRFConfig(), enforce=True)
    >>>
    >>> @app.get("/comments/new")
    >>> async def new_comment(csrf: CSRFContext = Depends(get_csrf_context)):
    ...     return {"authenticity_token": csrf.current_token()}
"""

from csrf_sdk.client import CSRFClient
from csrf_sdk.config import CSRFConfig
from csrf_sdk.context import CSRFContext
from csrf_sdk.cookies import CookieBinding
from csrf_sdk.dependencies import get_csrf_context, require_csrf_token
from csrf_sdk.exceptions import (
    ConfigurationError,
    CSRFContextMissingError,
    CSRFSDKError,
    CSRFVerificationError,
    MissingCandidateError,
    TokenGenerationError,
    TokenMismatchError,
    register_exception_handlers,
)
from csrf_sdk.middleware import STATE_CHANGING_METHODS, CSRFMiddleware
from csrf_sdk.token import TokenGenerator
from csrf_sdk.verification import VerificationEngine, VerificationOutcome

__all__ = [
    "CSRFMiddleware",
    "CSRFConfig",
    "CSRFContext",
    "CookieBinding",
    "TokenGenerator",
    "VerificationEngine",
    "VerificationOutcome",
    "get_csrf_context",
    "require_csrf_token",
    "register_exception_handlers",
    "CSRFClient",
    "CSRFSDKError",
    "ConfigurationError",
    "TokenGenerationError",
    "CSRFVerificationError",
    "MissingCandidateError",
    "TokenMismatchError",
    "CSRFContextMissingError",
    "STATE_CHANGING_METHODS",
]
