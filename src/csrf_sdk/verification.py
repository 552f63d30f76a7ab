"""CSRF 토큰 검증 모듈.

요청에서 후보 토큰을 추출하고 쿠키에 바인딩된 토큰과 비교합니다.
후보 토큰은 설정된 헤더를 먼저 확인하고, 헤더가 없을 때만 폼 필드를 확인합니다.
"""

import hmac
from enum import StrEnum

from starlette.datastructures import FormData
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.types import Message

from csrf_sdk.config import CSRFConfig

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class VerificationOutcome(StrEnum):
    """검증 결과 열거형."""

    VERIFIED = "verified"
    MISSING_CANDIDATE = "missing_candidate"
    MISMATCH = "mismatch"


class VerificationEngine:
    """후보 토큰 추출 및 상수 시간 비교.

    Args:
        config: CSRF 설정

    Example:
        >>> engine = VerificationEngine(CSRFConfig())
        >>> engine.compare("abc", "abc")
        <VerificationOutcome.VERIFIED: 'verified'>
    """

    def __init__(self, config: CSRFConfig) -> None:
        self.config = config

    async def extract_candidate(self, request: Request) -> str | None:
        """요청에서 후보 토큰을 추출합니다.

        1. 설정된 헤더 (빈 값은 없는 것으로 취급)
        2. 헤더가 없으면 폼 본문의 설정된 필드

        폼 본문은 ``request.body()``로 캐시한 뒤 별도 요청 객체에서 파싱하고
        즉시 닫으므로, 이후 핸들러는 원본 요청의 본문을 그대로 읽을 수 있습니다.
        형식이 잘못된 폼 본문은 후보 토큰이 없는 것으로 취급합니다.

        Args:
            request: 요청 객체

        Returns:
            후보 토큰. 어느 쪽에도 없으면 None
        """
        header_value = request.headers.get(self.config.header_name)
        if header_value:
            return header_value

        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith(FORM_CONTENT_TYPES):
            return None

        try:
            return await self._read_form_field(request)
        except (HTTPException, MultiPartException, ValueError):
            # python-multipart의 파서 오류는 ValueError 계열로 그대로 전파됨
            return None

    async def _read_form_field(self, request: Request) -> str | None:
        try:
            body = await request.body()
        except RuntimeError:
            # 프레임워크가 이미 폼을 파싱한 경우: 캐시된 결과를 사용하며 닫지 않음
            return self._form_field(await request.form())

        async def replay() -> Message:
            return {"type": "http.request", "body": body, "more_body": False}

        async with Request(request.scope, replay).form() as form:
            return self._form_field(form)

    def _form_field(self, form: FormData) -> str | None:
        field_value = form.get(self.config.form_field_name)
        if isinstance(field_value, str) and field_value:
            return field_value
        return None

    def compare(self, candidate: str | None, bound_token: str | None) -> VerificationOutcome:
        """후보 토큰을 바인딩된 토큰과 비교합니다.

        비교는 ``hmac.compare_digest``로 전체 길이에 대해 수행되어
        일치하는 접두사 길이가 응답 시간으로 드러나지 않습니다.
        """
        if not candidate:
            return VerificationOutcome.MISSING_CANDIDATE
        if not bound_token:
            return VerificationOutcome.MISMATCH

        if hmac.compare_digest(candidate.encode("utf-8"), bound_token.encode("utf-8")):
            return VerificationOutcome.VERIFIED
        return VerificationOutcome.MISMATCH

    async def verify(self, request: Request, bound_token: str | None) -> VerificationOutcome:
        """요청의 후보 토큰을 추출하여 바인딩된 토큰과 비교합니다.

        Args:
            request: 요청 객체
            bound_token: 요청 쿠키에 바인딩되어 있던 토큰 (새로 발급한 토큰이 아님)

        Returns:
            검증 결과
        """
        candidate = await self.extract_candidate(request)
        return self.compare(candidate, bound_token)
