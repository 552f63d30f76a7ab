"""CSRF 토큰 생성 모듈.

운영체제의 보안 난수 소스(``secrets``)로 토큰을 생성하고,
쿠키/헤더/폼 필드에 그대로 실을 수 있는 URL-safe base64 문자열로 인코딩합니다.
"""

import base64
import binascii
import secrets

from csrf_sdk.exceptions import TokenGenerationError
from csrf_sdk.logging import get_logger

logger = get_logger(__name__)


class TokenGenerator:
    """CSRF 토큰 생성 및 디코딩"""

    @staticmethod
    def generate(byte_length: int) -> str:
        """CSRF 토큰 생성

        Args:
            byte_length: 인코딩 전 원시 난수 바이트 길이

        Returns:
            패딩이 제거된 URL-safe base64 토큰

        Raises:
            TokenGenerationError: 보안 난수 소스를 사용할 수 없는 경우
        """
        try:
            raw = secrets.token_bytes(byte_length)
        except OSError as e:
            logger.critical("csrf_random_source_unavailable", error=str(e))
            raise TokenGenerationError() from e

        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @staticmethod
    def decode(token: str) -> bytes | None:
        """토큰을 원시 바이트로 디코딩합니다.

        Returns:
            디코딩된 바이트. 형식이 잘못된 경우 None
        """
        if not token:
            return None

        padded = token + "=" * (-len(token) % 4)
        try:
            return base64.b64decode(
                padded.encode("ascii"), altchars=b"-_", validate=True
            )
        except (binascii.Error, UnicodeEncodeError, ValueError):
            return None

    @staticmethod
    def is_well_formed(token: str | None, byte_length: int) -> bool:
        """토큰이 정확히 byte_length 바이트로 디코딩되는지 확인합니다."""
        if token is None:
            return False
        raw = TokenGenerator.decode(token)
        return raw is not None and len(raw) == byte_length
