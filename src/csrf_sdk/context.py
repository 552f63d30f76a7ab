"""요청 단위 CSRF 컨텍스트 모듈.

CSRFMiddleware가 요청마다 하나씩 생성하여 ``request.state.csrf``에 저장하며,
핸들러는 이를 일반 인자로 받아 토큰을 출력에 포함하거나 직접 검증합니다.
"""

from html import escape

from starlette.requests import Request

from csrf_sdk.config import CSRFConfig
from csrf_sdk.verification import VerificationEngine, VerificationOutcome


class CSRFContext:
    """요청 단위 토큰 접근자.

    Args:
        config: CSRF 설정
        bound_token: 요청 쿠키에 있던 유효한 토큰 (없으면 None)
        issued_token: 이번 요청에서 새로 발급되어 응답 쿠키로 나갈 토큰

    Attributes:
        bound_token: 검증 기준이 되는 기존 토큰
        issued_token: 새로 발급된 토큰 (기존 토큰이 유효하면 None)
    """

    def __init__(
        self,
        config: CSRFConfig,
        bound_token: str | None,
        issued_token: str | None = None,
    ) -> None:
        if bound_token is None and issued_token is None:
            raise ValueError("bound_token 또는 issued_token 중 하나는 필요합니다")
        self.config = config
        self.bound_token = bound_token
        self.issued_token = issued_token
        self._engine = VerificationEngine(config)

    @property
    def is_fresh(self) -> bool:
        """이번 요청에서 토큰이 새로 발급되었는지 여부."""
        return self.issued_token is not None

    def current_token(self) -> str:
        """출력에 포함할 현재 토큰을 반환합니다 (바인딩된 토큰 또는 새로 발급된 토큰)."""
        return self.issued_token or self.bound_token  # type: ignore[return-value]

    def verify(self, candidate: str | None) -> VerificationOutcome:
        """후보 토큰을 바인딩된 토큰과 비교합니다.

        새로 발급된 토큰은 클라이언트가 아직 받은 적이 없으므로
        검증 기준으로 사용하지 않습니다.
        """
        return self._engine.compare(candidate, self.bound_token)

    async def verify_request(self, request: Request) -> VerificationOutcome:
        """요청의 헤더/폼 필드에서 후보 토큰을 추출하여 검증합니다."""
        return await self._engine.verify(request, self.bound_token)

    def meta_tags(self) -> str:
        """AJAX 클라이언트용 csrf-param / csrf-token meta 태그를 생성합니다."""
        return (
            f'<meta name="csrf-param" content="{escape(self.config.form_field_name)}">\n'
            f'<meta name="csrf-token" content="{escape(self.current_token())}">'
        )

    def hidden_input(self) -> str:
        """폼에 포함할 hidden input 태그를 생성합니다."""
        return (
            f'<input type="hidden" name="{escape(self.config.form_field_name)}" '
            f'value="{escape(self.current_token())}">'
        )
