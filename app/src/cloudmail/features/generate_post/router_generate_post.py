"""下書き生成エンドポイント。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cloudmail.core.settings import Settings
from cloudmail.features.generate_post.schemas_generate_post import (
    GenerateRequest,
    GenerateResponse,
)
from cloudmail.features.generate_post.usecase_generate_post import generate_email
from cloudmail.shared.schemas.envelope import ErrorResponse

router = APIRouter(tags=["compose"])


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate(
    payload: GenerateRequest,
    settings: Settings = Depends(get_settings),
) -> GenerateResponse:
    """
    プロンプトからメールの下書きを生成する。

    失敗は app 側の例外ハンドラで `{"error": ...}` に変換される。
    """

    result = await generate_email(payload.prompt, settings=settings)
    return GenerateResponse(email=result.draft_text)
