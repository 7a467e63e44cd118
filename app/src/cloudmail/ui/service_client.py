"""画面側から `/generate`・`/send` を呼ぶクライアント。

結果は例外ではなく `ServiceSuccess` / `ServiceFailure` の判別値で返す。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

import httpx

from cloudmail.clients.http_client import create_async_client

T = TypeVar("T")

DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=5.0)
NETWORK_ERROR_MESSAGE = "Network error: Unable to reach the email service"


@dataclass(slots=True, frozen=True)
class ServiceSuccess(Generic[T]):
    value: T
    ok: Literal[True] = True


@dataclass(slots=True, frozen=True)
class ServiceFailure:
    error: str
    status_code: int | None = None
    ok: Literal[False] = False


ServiceResult = Union[ServiceSuccess[T], ServiceFailure]


class ComposeServiceClient:
    """オーケストレータ API の薄いラッパー。"""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = create_async_client(
            timeout=timeout or DEFAULT_TIMEOUT,
            transport=transport,
            base_url=base_url,
        )

    async def __aenter__(self) -> "ComposeServiceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def generate(self, prompt: str) -> ServiceResult[str]:
        result = await self._post("/generate", {"prompt": prompt})
        if isinstance(result, ServiceFailure):
            return result
        email = result.value.get("email")
        if not isinstance(email, str):
            return ServiceFailure(error="Failed to generate email. Please try again.")
        return ServiceSuccess(email)

    async def send(self, recipients: str, email_body: str) -> ServiceResult[None]:
        result = await self._post(
            "/send", {"recipients": recipients, "emailBody": email_body}
        )
        if isinstance(result, ServiceFailure):
            return result
        return ServiceSuccess(None)

    async def _post(self, path: str, payload: dict[str, Any]) -> ServiceResult[dict[str, Any]]:
        try:
            response = await self._client.post(path, json=payload)
        except httpx.TransportError:
            return ServiceFailure(error=NETWORK_ERROR_MESSAGE)

        try:
            body = response.json()
        except json.JSONDecodeError:
            body = None

        if response.is_error:
            return ServiceFailure(
                error=_error_message(body, response), status_code=response.status_code
            )
        if not isinstance(body, dict):
            return ServiceFailure(
                error=f"Unexpected response from {path}", status_code=response.status_code
            )
        return ServiceSuccess(body)


def _error_message(body: Any, response: httpx.Response) -> str:
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"Request failed: {response.status_code} {response.reason_phrase}"
