"""CSRF SDK 예외 클래스 모듈.

토큰 발급, 검증, 설정 과정에서 발생할 수 있는 예외를 정의합니다.
각 예외는 대응하는 HTTP 상태 코드 및 에러 코드와 매핑됩니다.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class CSRFSDKError(Exception):
    """CSRF SDK 기본 예외 클래스.

    모든 CSRF SDK 예외의 부모 클래스입니다.

    Attributes:
        message: 오류 메시지
        status_code: HTTP 상태 코드
        error_code: 응답 본문에 포함되는 에러 코드
    """

    def __init__(
        self,
        message: str = "CSRF SDK 오류가 발생했습니다",
        status_code: int = 500,
        error_code: str = "CSRF_000",
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class ConfigurationError(CSRFSDKError):
    """잘못된 설정 예외.

    설정 생성 시점에 검증되며, 서버가 트래픽을 받기 전에 실패해야 합니다.
    """

    def __init__(self, message: str = "CSRF 설정이 올바르지 않습니다") -> None:
        super().__init__(message=message)


class TokenGenerationError(CSRFSDKError):
    """보안 난수 소스를 사용할 수 없는 경우 발생합니다."""

    def __init__(self, message: str = "CSRF 토큰을 생성할 수 없습니다") -> None:
        super().__init__(message=message)


class CSRFVerificationError(CSRFSDKError):
    """CSRF 검증 실패 예외 (HTTP 403)."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message=message, status_code=403, error_code=error_code)


class MissingCandidateError(CSRFVerificationError):
    """헤더와 폼 필드 어디에도 토큰이 제출되지 않은 경우."""

    def __init__(self, message: str = "missing token header/field") -> None:
        super().__init__(message=message, error_code="CSRF_001")


class TokenMismatchError(CSRFVerificationError):
    """제출된 토큰이 쿠키에 바인딩된 토큰과 일치하지 않는 경우."""

    def __init__(self, message: str = "token verification failed") -> None:
        super().__init__(message=message, error_code="CSRF_002")


class CSRFContextMissingError(CSRFSDKError):
    """CSRFMiddleware 없이 요청 컨텍스트에 접근한 경우 (HTTP 500)."""

    def __init__(
        self, message: str = "CSRFMiddleware가 설치되지 않았습니다"
    ) -> None:
        super().__init__(message=message, error_code="CSRF_003")


class CSRFServiceUnavailableError(CSRFSDKError):
    """대상 서비스에 연결할 수 없는 경우 (HTTP 503)."""

    def __init__(self, message: str = "서비스에 연결할 수 없습니다") -> None:
        super().__init__(message=message, status_code=503, error_code="CSRF_004")


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """표준 에러 응답을 생성합니다.

    표준 에러 응답 형식:
    {
        "success": false,
        "data": null,
        "error": {
            "code": "CSRF_002",
            "message": "token verification failed",
            "details": {}
        }
    }
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "data": None,
            "error": {
                "code": error_code,
                "message": message,
                "details": details or {},
            },
        },
    )


async def csrf_exception_handler(request: Request, exc: CSRFSDKError) -> JSONResponse:
    """CSRFSDKError 전역 핸들러."""
    return error_response(exc.status_code, exc.error_code, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    """FastAPI 애플리케이션에 CSRF 예외 핸들러 등록"""
    app.add_exception_handler(CSRFSDKError, csrf_exception_handler)
