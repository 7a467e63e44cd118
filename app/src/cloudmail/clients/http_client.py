"""httpx クライアントの共通設定。"""

from __future__ import annotations

import httpx

# 生成 API は応答に時間がかかるため読み取りを長めに取る
DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=5.0)


def create_async_client(
    *,
    timeout: httpx.Timeout | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    base_url: str = "",
) -> httpx.AsyncClient:
    """共通タイムアウト付きの AsyncClient を生成する。"""

    return httpx.AsyncClient(
        timeout=timeout or DEFAULT_TIMEOUT,
        transport=transport,
        base_url=base_url,
    )
