"""요청 연결 정보 헬퍼.

전달 헤더(X-Forwarded-For, X-Real-IP, X-Forwarded-Proto)는 직접 연결된 피어가
신뢰 프록시일 때만 반영합니다. 감사 로그의 클라이언트 주소와
Secure 쿠키 판단이 위조된 헤더에 좌우되지 않도록 합니다.
"""

import ipaddress

from starlette.requests import Request

# 사설 대역과 루프백만 프록시로 신뢰
TRUSTED_PROXY_NETWORKS = tuple(
    ipaddress.ip_network(network)
    for network in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "::1/128",
        "fd00::/8",
    )
)


def is_trusted_proxy(ip: str) -> bool:
    """피어 주소가 신뢰 프록시 대역에 속하는지 확인합니다.

    Example:
        >>> is_trusted_proxy("10.1.2.3")
        True
        >>> is_trusted_proxy("203.0.113.7")
        False
    """
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(address in network for network in TRUSTED_PROXY_NETWORKS)


def _peer_host(request: Request) -> str | None:
    return request.client.host if request.client else None


def _peer_is_trusted(request: Request) -> bool:
    peer = _peer_host(request)
    return bool(peer) and is_trusted_proxy(peer)


def get_client_ip(request: Request) -> str:
    """감사 로그에 기록할 클라이언트 주소를 반환합니다.

    신뢰 프록시를 거친 요청이면 X-Forwarded-For의 첫 주소, 그다음 X-Real-IP를
    사용합니다. 그 외에는 직접 연결된 피어 주소이며, 피어 정보가 없으면 "unknown"입니다.
    """
    if _peer_is_trusted(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    return _peer_host(request) or "unknown"


def get_client_info(request: Request) -> tuple[str, str | None]:
    """(클라이언트 주소, User-Agent) 쌍."""
    return get_client_ip(request), request.headers.get("User-Agent")


def is_secure_request(request: Request) -> bool:
    """클라이언트 연결이 암호화되어 있으면 True.

    URL 스킴이 우선이며, X-Forwarded-Proto는 신뢰 프록시를 거친 요청에서만 확인합니다.
    """
    if request.url.scheme in ("https", "wss"):
        return True

    if _peer_is_trusted(request):
        forwarded_proto = request.headers.get("X-Forwarded-Proto", "")
        return forwarded_proto.split(",")[0].strip().lower() == "https"

    return False
