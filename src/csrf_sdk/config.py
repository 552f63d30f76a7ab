"""CSRF SDK 설정 모듈.

환경 변수 또는 명시적인 인자로 CSRF 보호 설정값을 관리합니다.
모든 환경 변수는 CSRF_ 접두사를 사용합니다.

설정은 생성 시점에 검증되며 이후 변경할 수 없습니다. 프로세스 전체에서
하나의 인스턴스를 만들어 미들웨어와 의존성에 그대로 전달합니다.
"""

import math
import re
from datetime import timedelta
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csrf_sdk.exceptions import ConfigurationError

# RFC 7230 token 문자 (헤더 이름, 쿠키 이름에 허용되는 문자)
_HTTP_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

SAMESITE_VALUES = ("strict", "lax")


class CSRFConfig(BaseSettings):
    """CSRF 보호 설정 클래스.

    Attributes:
        cookie_name: 토큰을 저장하는 쿠키 이름 (기본값: authenticity)
        token_len: 인코딩 전 토큰 바이트 길이 (기본값: 32)
        lifetime: 쿠키 유효 기간. None이면 세션 쿠키 (기본값: None)
        header_name: 토큰을 제출하는 요청 헤더 이름 (기본값: X-CSRF-Token)
        form_field_name: 토큰을 제출하는 폼 필드 이름 (기본값: authenticity_token)
        cookie_path: 쿠키 Path 속성 (기본값: /)
        samesite: 쿠키 SameSite 속성, strict 또는 lax (기본값: strict)
        secure_cookie: Secure 속성 강제 여부. None이면 요청의 암호화 여부로 결정

    Example:
        >>> config = CSRFConfig().with_cookie_name("my_csrf").with_token_len(64)
        >>> config.cookie_name
        'my_csrf'
    """

    cookie_name: str = "authenticity"
    token_len: int = 32
    lifetime: timedelta | None = None
    header_name: str = "X-CSRF-Token"
    form_field_name: str = "authenticity_token"
    cookie_path: str = "/"
    samesite: str = "strict"
    secure_cookie: bool | None = None

    model_config = SettingsConfigDict(
        env_prefix="CSRF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="after")
    def _validate_options(self) -> "CSRFConfig":
        """설정값을 검증합니다. 잘못된 값은 보정하지 않고 즉시 실패합니다."""
        if not self.cookie_name.strip():
            raise ConfigurationError("cookie_name은 비어 있을 수 없습니다")
        if not _HTTP_TOKEN_RE.match(self.cookie_name):
            raise ConfigurationError(
                f"cookie_name에 허용되지 않는 문자가 있습니다: {self.cookie_name!r}"
            )

        if self.token_len <= 0:
            raise ConfigurationError(
                f"token_len은 양의 정수여야 합니다: {self.token_len}"
            )

        # Max-Age는 초 단위이므로 1초 미만은 즉시 만료되는 쿠키가 됨
        if self.lifetime is not None and self.lifetime.total_seconds() < 1:
            raise ConfigurationError(
                f"lifetime은 1초 이상이어야 합니다: {self.lifetime}"
            )

        if not self.header_name.strip():
            raise ConfigurationError("header_name은 비어 있을 수 없습니다")
        if not _HTTP_TOKEN_RE.match(self.header_name):
            raise ConfigurationError(
                f"header_name에 허용되지 않는 문자가 있습니다: {self.header_name!r}"
            )

        if not self.form_field_name.strip():
            raise ConfigurationError("form_field_name은 비어 있을 수 없습니다")

        if not self.cookie_path.startswith("/"):
            raise ConfigurationError("cookie_path는 '/'로 시작해야 합니다")

        if self.samesite.lower() not in SAMESITE_VALUES:
            raise ConfigurationError(
                f"samesite는 {SAMESITE_VALUES} 중 하나여야 합니다: {self.samesite!r}"
            )

        return self

    @property
    def max_age(self) -> int | None:
        """쿠키 Max-Age 초 값. lifetime이 없으면 None (세션 쿠키)."""
        if self.lifetime is None:
            return None
        return math.ceil(self.lifetime.total_seconds())

    def _replace(self, **changes: Any) -> "CSRFConfig":
        """변경 사항을 적용한 새 설정을 생성합니다 (검증 포함)."""
        return type(self)(**{**self.model_dump(), **changes})

    def with_cookie_name(self, name: str) -> "CSRFConfig":
        return self._replace(cookie_name=name)

    def with_token_len(self, length: int) -> "CSRFConfig":
        return self._replace(token_len=length)

    def with_lifetime(self, lifetime: timedelta | None) -> "CSRFConfig":
        return self._replace(lifetime=lifetime)

    def with_header_name(self, name: str) -> "CSRFConfig":
        return self._replace(header_name=name)

    def with_form_field_name(self, name: str) -> "CSRFConfig":
        return self._replace(form_field_name=name)

    def with_samesite(self, samesite: str) -> "CSRFConfig":
        return self._replace(samesite=samesite)

    def with_secure_cookie(self, secure: bool | None) -> "CSRFConfig":
        return self._replace(secure_cookie=secure)
