from __future__ import annotations

import os

os.environ.setdefault("GROQ_API_KEY", "gsk-test")
os.environ.setdefault("EMAIL_USER", "sender@example.com")
os.environ.setdefault("EMAIL_PASS", "app-password")
os.environ.setdefault("ORIGIN", "http://localhost:5173")

import pytest

from cloudmail.core import settings as core_settings
from cloudmail.core.settings import Settings


@pytest.fixture(autouse=True)
def basic_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """アプリ初期化に必要な環境変数をテスト時にセットする。"""

    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    monkeypatch.setenv("EMAIL_USER", "sender@example.com")
    monkeypatch.setenv("EMAIL_PASS", "app-password")
    monkeypatch.setenv("ORIGIN", "http://localhost:5173")
    monkeypatch.delenv("APP_ENV", raising=False)
    core_settings.load_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="local",
        region="ap-northeast-1",
        groq_api_key="gsk-test",
        groq_model="llama3-8b-8192",
        email_user="sender@example.com",
        email_pass="app-password",
        smtp_host="smtp.example.com",
        smtp_port=465,
        cors_origin="http://localhost:5173",
    )
