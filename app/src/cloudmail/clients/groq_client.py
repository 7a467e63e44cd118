"""Groq (OpenAI 互換 Chat Completions) の生成クライアント。"""

from __future__ import annotations

from typing import Any

import httpx

from cloudmail.clients.http_client import create_async_client
from cloudmail.core.errors import ConnectivityError, InternalError, ProviderError
from cloudmail.core.models import GenerationResult


GROQ_CHAT_ENDPOINT = "https://api.groq.com/openai/v1/chat/completions"
MAX_OUTPUT_TOKENS = 1000
TEMPERATURE = 0.7


def build_payload(*, model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": MAX_OUTPUT_TOKENS,
        "temperature": TEMPERATURE,
    }


async def generate_draft(
    *,
    api_key: str,
    model: str,
    prompt: str,
    timeout: httpx.Timeout | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GenerationResult:
    """
    プロンプトを 1 回だけ送信し、最初の候補の本文を下書きとして返す。

    Args:
        api_key: Groq API キー
        model: 利用するモデル ID
        prompt: ユーザー入力のプロンプト（空でないこと）
        timeout: httpx タイムアウト（省略時は共通設定）
        transport: テスト用に差し替える httpx トランスポート

    Returns:
        プロバイダの出力を加工せずに保持した GenerationResult

    Raises:
        ProviderError: プロバイダがエラーステータスを返した場合
        ConnectivityError: プロバイダへ到達できなかった場合
        InternalError: リクエスト構築・レスポンス解析に失敗した場合
    """

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    try:
        payload = build_payload(model=model, prompt=prompt)
        async with create_async_client(timeout=timeout, transport=transport) as client:
            response = await client.post(GROQ_CHAT_ENDPOINT, json=payload, headers=headers)
    except httpx.TransportError as exc:
        raise ConnectivityError("Network error: Unable to connect to Groq API") from exc
    except Exception as exc:
        raise InternalError("Failed to generate email content") from exc

    if response.is_error:
        raise ProviderError(_build_error_message(response), status_code=response.status_code)

    return GenerationResult(draft_text=_extract_content(response))


def _extract_content(response: httpx.Response) -> str:
    try:
        content = response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise InternalError("Failed to generate email content") from exc
    if not isinstance(content, str):
        raise InternalError("Failed to generate email content")
    return content


def _build_error_message(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return "Groq API Error: API request failed"

    message = ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = str(error.get("message") or "")
    return f"Groq API Error: {message or 'API request failed'}"
