"""Test helpers shared by unit tests."""

from starlette.requests import Request


def make_request(
    method: str = "GET",
    path: str = "/",
    headers: dict[str, str] | None = None,
    body: bytes = b"",
    scheme: str = "http",
    client_host: str | None = "203.0.113.10",
) -> Request:
    """Build a raw Starlette request for unit tests."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("utf-8"))
        for name, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "root_path": "",
        "scheme": scheme,
        "query_string": b"",
        "headers": raw_headers,
        "server": ("test", 443 if scheme == "https" else 80),
        "client": (client_host, 50000) if client_host else None,
    }

    async def receive() -> dict:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)
