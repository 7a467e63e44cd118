"""下書き生成ユースケース。"""

from __future__ import annotations

from cloudmail.clients import groq_client
from cloudmail.core.errors import ValidationError
from cloudmail.core.models import GenerationResult
from cloudmail.core.settings import Settings

PROMPT_REQUIRED_MESSAGE = "Prompt is required"


async def generate_email(prompt: str | None, *, settings: Settings) -> GenerationResult:
    """プロンプトを検証し、生成クライアントへ委譲する。

    Raises:
        ValidationError: プロンプトが未指定・空白のみの場合（ネットワーク呼び出しなし）
    """

    if not prompt or not prompt.strip():
        raise ValidationError(PROMPT_REQUIRED_MESSAGE)

    return await groq_client.generate_draft(
        api_key=settings.groq_api_key,
        model=settings.groq_model,
        prompt=prompt,
    )
