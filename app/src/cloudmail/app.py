"""FastAPI アプリケーションの組み立てを担当するモジュール。"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.handlers import register_exception_handlers
from .core.middleware import request_id_middleware
from .core.settings import Settings, load_settings
from .features.generate_post.router_generate_post import router as generate_router
from .features.send_post.router_send_post import router as send_router
from .shared.schemas.envelope import HealthResponse


def create_app(settings: Settings | None = None) -> FastAPI:
    """コア設定や共通ミドルウェアを組み込んだ FastAPI アプリを返す。

    Raises:
        ValueError: 必須設定が欠けている場合（起動を中止する）
    """

    settings = settings or load_settings()
    app = FastAPI(title="cloudmail", version="0.1.0")
    app.state.settings = settings  # type: ignore[attr-defined]
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health", tags=["health"], response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))

    app.include_router(generate_router)
    app.include_router(send_router)

    return app
