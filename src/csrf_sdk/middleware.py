"""CSRF 보호 미들웨어 모듈.

모든 요청에서 토큰 쿠키를 보장하고, 전역 검증이 켜져 있으면
상태 변경 요청(POST/PUT/PATCH/DELETE)을 핸들러 호출 전에 검증합니다.
"""

from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from csrf_sdk.config import CSRFConfig
from csrf_sdk.context import CSRFContext
from csrf_sdk.cookies import CookieBinding
from csrf_sdk.exceptions import (
    CSRFVerificationError,
    MissingCandidateError,
    TokenMismatchError,
    error_response,
)
from csrf_sdk.logging import security_logger
from csrf_sdk.token import TokenGenerator
from csrf_sdk.utils import is_secure_request
from csrf_sdk.verification import VerificationEngine, VerificationOutcome

STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

_REJECTIONS: dict[VerificationOutcome, type[CSRFVerificationError]] = {
    VerificationOutcome.MISSING_CANDIDATE: MissingCandidateError,
    VerificationOutcome.MISMATCH: TokenMismatchError,
}


class CSRFMiddleware(BaseHTTPMiddleware):
    """CSRF 보호 미들웨어.

    요청마다 CSRFContext를 생성하여 request.state.csrf에 설정합니다.
    쿠키에 유효한 토큰이 없으면 새 토큰을 발급해 최종 응답에 쿠키로 설정합니다.

    Args:
        app: ASGI 애플리케이션
        config: CSRF 설정 (None이면 환경 변수/기본값 사용)
        enforce: 상태 변경 요청 전역 검증 여부 (기본값: False)
        exempt_paths: 전역 검증을 건너뛸 경로 접두사 목록

    Example:
        >>> from fastapi import FastAPI
        >>> from csrf_sdk import CSRFConfig, CSRFMiddleware
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(CSRFMiddleware, config=CSRFConfig(), enforce=True)
    """

    def __init__(
        self,
        app: Any,
        config: CSRFConfig | None = None,
        enforce: bool = False,
        exempt_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.config = config or CSRFConfig()
        self.enforce = enforce
        self.exempt_paths = exempt_paths or []
        self.cookies = CookieBinding(self.config)
        self.engine = VerificationEngine(self.config)

    def _is_exempt_path(self, path: str) -> bool:
        return any(path.startswith(exempt) for exempt in self.exempt_paths)

    def _requires_verification(self, request: Request) -> bool:
        """전역 검증 대상 요청인지 확인합니다."""
        return (
            self.enforce
            and request.method.upper() in STATE_CHANGING_METHODS
            and not self._is_exempt_path(request.url.path)
        )

    def _ensure_token(self, request: Request) -> CSRFContext:
        """쿠키의 토큰을 읽고, 없거나 잘못된 경우 새 토큰을 발급합니다."""
        bound_token = self.cookies.read(request)
        issued_token = None
        if bound_token is None:
            issued_token = TokenGenerator.generate(self.config.token_len)
            security_logger.log_token_issued(request.url.path)
        return CSRFContext(self.config, bound_token, issued_token)

    def _attach_cookie(self, request: Request, response: Response, context: CSRFContext) -> Response:
        if context.issued_token is not None:
            self.cookies.write(
                response, context.issued_token, secure=is_secure_request(request)
            )
        return response

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """미들웨어 요청 처리 로직.

        Args:
            request: 요청 객체
            call_next: 다음 미들웨어/핸들러 호출 함수

        Returns:
            HTTP 응답 객체 (필요 시 토큰 쿠키 포함)
        """
        context = self._ensure_token(request)
        request.state.csrf = context

        if self._requires_verification(request):
            # 새로 발급한 토큰이 아닌 기존 바인딩 토큰과 비교
            outcome = await self.engine.verify(request, context.bound_token)
            if outcome is not VerificationOutcome.VERIFIED:
                security_logger.log_verification_failed(request, outcome.value)
                exc = _REJECTIONS[outcome]()
                rejection = error_response(exc.status_code, exc.error_code, exc.message)
                return self._attach_cookie(request, rejection, context)
            security_logger.log_verification_succeeded(request)

        response = await call_next(request)
        return self._attach_cookie(request, response, context)
