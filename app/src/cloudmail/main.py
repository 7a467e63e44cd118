"""ローカル/ Lambda エントリポイント。"""

from __future__ import annotations

import logging
import os
from typing import Any

import uvicorn
from fastapi import FastAPI
from mangum import Mangum

from .app import create_app
from .core.logging import log_event


def build_app() -> FastAPI:
    """設定が揃っていなければ、リクエストを受け付ける前にプロセスを終了する。"""

    try:
        application = create_app()
    except ValueError as exc:
        log_event("startup_failed", level=logging.CRITICAL, error=str(exc))
        raise SystemExit(1) from exc

    settings = application.state.settings  # type: ignore[attr-defined]
    log_event(
        "startup",
        env=settings.app_env,
        sender=settings.email_user,
        smtp_host=settings.smtp_host,
        groq_model=settings.groq_model,
    )
    return application


app = build_app()
_handler = Mangum(app)


def lambda_handler(event: dict[str, Any], context: Any) -> Any:
    """AWS Lambda から呼び出されるエントリポイント"""
    return _handler(event, context)


def run_local() -> None:
    """`cloudmail-api` 用のローカル実行関数。"""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "3001"))
    uvicorn.run("cloudmail.main:app", host=host, port=port, reload=True)


if os.getenv("RUN_LOCAL") == "1":
    run_local()
