"""FastAPI 의존성 주입 헬퍼 모듈.

미들웨어가 설정한 request.state.csrf를 기반으로 동작합니다.
전역 검증을 사용하지 않는 경우 라우트 단위로 검증을 적용할 수 있습니다.

Example:
    >>> from fastapi import APIRouter, Depends
    >>> from csrf_sdk import CSRFContext, get_csrf_context, require_csrf_token
    >>>
    >>> router = APIRouter()
    >>>
    >>> @router.get("/comments/new")
    >>> async def new_comment(csrf: CSRFContext = Depends(get_csrf_context)):
    ...     return {"authenticity_token": csrf.current_token()}
    >>>
    >>> @router.post("/comments", dependencies=[Depends(require_csrf_token)])
    >>> async def create_comment():
    ...     return {"created": True}
"""

from fastapi import Depends, Request

from csrf_sdk.context import CSRFContext
from csrf_sdk.exceptions import (
    CSRFContextMissingError,
    MissingCandidateError,
    TokenMismatchError,
)
from csrf_sdk.logging import security_logger
from csrf_sdk.verification import VerificationOutcome


async def get_csrf_context(request: Request) -> CSRFContext:
    """현재 요청의 CSRF 컨텍스트를 반환하는 의존성 함수.

    Raises:
        CSRFContextMissingError: CSRFMiddleware가 설치되지 않은 경우
    """
    context: CSRFContext | None = getattr(request.state, "csrf", None)
    if context is None:
        raise CSRFContextMissingError()
    return context


async def require_csrf_token(
    request: Request,
    context: CSRFContext = Depends(get_csrf_context),
) -> CSRFContext:
    """CSRF 토큰 검증을 요구하는 의존성 함수.

    POST/PUT/PATCH/DELETE 엔드포인트에서 사용합니다.

    Raises:
        MissingCandidateError: 헤더와 폼 필드 모두 토큰이 없는 경우
        TokenMismatchError: 토큰이 일치하지 않는 경우
    """
    outcome = await context.verify_request(request)
    if outcome is VerificationOutcome.MISSING_CANDIDATE:
        security_logger.log_verification_failed(request, outcome.value)
        raise MissingCandidateError()
    if outcome is VerificationOutcome.MISMATCH:
        security_logger.log_verification_failed(request, outcome.value)
        raise TokenMismatchError()
    return context
