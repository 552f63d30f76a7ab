"""CSRF 토큰 인식 HTTP 클라이언트 모듈.

CSRF 보호가 적용된 서비스를 호출하기 위한 비동기 HTTP 클라이언트를 제공합니다.
쿠키로 받은 토큰을 상태 변경 요청의 헤더에 자동으로 실어 보냅니다.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from csrf_sdk.config import CSRFConfig
from csrf_sdk.exceptions import CSRFServiceUnavailableError
from csrf_sdk.middleware import STATE_CHANGING_METHODS

logger = logging.getLogger(__name__)


class CSRFClient:
    """CSRF 토큰 인식 비동기 HTTP 클라이언트.

    Args:
        base_url: 대상 서비스 기본 URL
        config: 대상 서비스와 동일한 CSRF 설정 (쿠키/헤더 이름)
        timeout: HTTP 요청 타임아웃 (초 단위, 기본값: 5.0)
        transport: httpx 전송 계층 (테스트에서 ASGITransport 주입용)

    Example:
        >>> async with CSRFClient(base_url="http://comments:8000") as client:
        ...     await client.prime()
        ...     response = await client.post("/comments", json={"text": "hi"})
    """

    def __init__(
        self,
        base_url: str,
        config: CSRFConfig | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.config = config or CSRFConfig()
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """내부 httpx.AsyncClient 인스턴스를 반환합니다.

        클라이언트가 아직 생성되지 않은 경우 자동으로 생성합니다.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def __aenter__(self) -> "CSRFClient":
        """비동기 컨텍스트 매니저 진입."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """비동기 컨텍스트 매니저 종료 시 HTTP 클라이언트를 닫습니다."""
        await self.close()

    async def close(self) -> None:
        """HTTP 클라이언트 연결을 닫습니다."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @property
    def token(self) -> str | None:
        """쿠키 저장소에 보관된 현재 토큰."""
        return self.client.cookies.get(self.config.cookie_name)

    async def prime(self, path: str = "/") -> str | None:
        """GET 요청으로 토큰 쿠키를 발급받습니다.

        Returns:
            발급된 (또는 기존) 토큰
        """
        await self.request("GET", path)
        return self.token

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """요청을 전송합니다. 상태 변경 요청에는 토큰 헤더를 추가합니다.

        Raises:
            CSRFServiceUnavailableError: 서비스에 연결할 수 없는 경우
        """
        headers = dict(kwargs.pop("headers", None) or {})
        token = self.token
        if method.upper() in STATE_CHANGING_METHODS and token is not None:
            headers.setdefault(self.config.header_name, token)

        try:
            return await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.ConnectError as e:
            logger.warning("CSRF client connect failed: %s %s: %s", method, url, e)
            raise CSRFServiceUnavailableError("서비스에 연결할 수 없습니다") from e
        except httpx.TimeoutException as e:
            logger.warning("CSRF client request timed out: %s %s", method, url)
            raise CSRFServiceUnavailableError(
                "서비스 요청 시간이 초과되었습니다"
            ) from e

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
