"""メール送信エンドポイント。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cloudmail.core.settings import Settings
from cloudmail.features.send_post.schemas_send_post import SendRequest, SendResponse
from cloudmail.features.send_post.usecase_send_post import send_email
from cloudmail.shared.schemas.envelope import ErrorResponse

router = APIRouter(tags=["compose"])


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


@router.post(
    "/send",
    response_model=SendResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send(
    payload: SendRequest,
    settings: Settings = Depends(get_settings),
) -> SendResponse:
    await send_email(payload.recipients, payload.email_body, settings=settings)
    return SendResponse()
