"""CSRF 토큰 쿠키 바인딩 모듈.

요청 쿠키에서 토큰을 읽고, 응답에 토큰 쿠키를 설정합니다.
실제 HTTP 전송은 Starlette의 쿠키 처리에 맡깁니다.
"""

from starlette.requests import Request
from starlette.responses import Response

from csrf_sdk.config import CSRFConfig
from csrf_sdk.token import TokenGenerator


class CookieBinding:
    """요청/응답 쿠키 채널을 통한 토큰 읽기/쓰기.

    Args:
        config: CSRF 설정
    """

    def __init__(self, config: CSRFConfig) -> None:
        self.config = config

    def read(self, request: Request) -> str | None:
        """요청 쿠키에 바인딩된 토큰을 반환합니다.

        Args:
            request: 요청 객체

        Returns:
            형식이 올바른 토큰. 쿠키가 없거나 형식이 잘못된 경우 None
        """
        token = request.cookies.get(self.config.cookie_name)
        if not TokenGenerator.is_well_formed(token, self.config.token_len):
            return None
        return token

    def write(self, response: Response, token: str, secure: bool = False) -> None:
        """응답에 토큰 쿠키를 설정합니다.

        HttpOnly와 SameSite는 항상 적용합니다. Max-Age/Expires는
        lifetime이 설정된 경우에만 포함되며, 없으면 세션 쿠키가 됩니다.

        Args:
            response: 응답 객체
            token: 설정할 토큰
            secure: 암호화된 연결 여부 (config.secure_cookie가 있으면 그 값이 우선)
        """
        if self.config.secure_cookie is not None:
            secure = self.config.secure_cookie

        max_age = self.config.max_age
        response.set_cookie(
            key=self.config.cookie_name,
            value=token,
            max_age=max_age,
            expires=max_age,
            path=self.config.cookie_path,
            secure=secure,
            httponly=True,
            samesite=self.config.samesite.lower(),
        )
