"""アプリ全体で共有する設定読み込みロジック。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

import boto3
from botocore.exceptions import ClientError
from dotenv import find_dotenv, load_dotenv


_DEFAULT_REGION = "ap-northeast-1"
_DEFAULT_GROQ_MODEL = "llama3-8b-8192"
_DEFAULT_SMTP_HOST = "smtp.gmail.com"
_DEFAULT_SMTP_PORT = 465
_LOCAL_ENV = "local"

REQUIRED_ENV_VARS = ("GROQ_API_KEY", "EMAIL_USER", "EMAIL_PASS", "ORIGIN")


@dataclass(slots=True, frozen=True)
class Settings:
    """起動時に一度だけ構築し、以後は変更しない設定値の集合。"""

    app_env: str
    region: str
    groq_api_key: str
    groq_model: str
    email_user: str
    email_pass: str
    smtp_host: str
    smtp_port: int
    cors_origin: str
    ssm_path_prefix: str | None = None

    @property
    def is_local(self) -> bool:
        return self.app_env == _LOCAL_ENV

    @property
    def smtp_use_tls(self) -> bool:
        # 465 は接続時点から TLS、それ以外は STARTTLS
        return self.smtp_port == 465


def _check_required_env(names: Iterable[str]) -> None:
    missing = [name for name in names if not os.getenv(name)]
    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


def _fetch_ssm_parameters(
    region: str, names: Iterable[str], prefix: str
) -> dict[str, str]:
    name_list = [f"{prefix}/{name}" for name in names]
    client = boto3.client("ssm", region_name=region)
    try:
        resp = client.get_parameters(Names=name_list, WithDecryption=True)
    except ClientError as exc:  # pragma: no cover - boto3 例外ラップ
        raise RuntimeError("SSM パラメータ取得に失敗しました。") from exc

    found = {item["Name"]: item["Value"] for item in resp.get("Parameters", [])}
    missing = {name for name in name_list if not found.get(name)}
    if missing:
        raise ValueError(f"Missing required SSM parameters: {', '.join(sorted(missing))}")
    return found


def _smtp_port() -> int:
    raw = os.getenv("SMTP_PORT")
    if not raw:
        return _DEFAULT_SMTP_PORT
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"SMTP_PORT must be an integer: {raw!r}") from exc


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """環境に応じて `.env` または SSM から設定を構築する。

    Raises:
        ValueError: 必須の設定値が欠けている場合
    """

    # APP_ENV を含む全項目を .env から拾えるよう、最初に読み込む
    load_dotenv(find_dotenv(usecwd=True))

    app_env = os.getenv("APP_ENV", _LOCAL_ENV)
    region = os.getenv("REGION", _DEFAULT_REGION)
    groq_model = os.getenv("GROQ_MODEL", _DEFAULT_GROQ_MODEL)
    smtp_host = os.getenv("SMTP_HOST", _DEFAULT_SMTP_HOST)
    smtp_port = _smtp_port()

    if app_env == _LOCAL_ENV:
        _check_required_env(REQUIRED_ENV_VARS)
        return Settings(
            app_env=app_env,
            region=region,
            groq_api_key=os.environ["GROQ_API_KEY"],
            groq_model=groq_model,
            email_user=os.environ["EMAIL_USER"],
            email_pass=os.environ["EMAIL_PASS"],
            smtp_host=smtp_host,
            smtp_port=smtp_port,
            cors_origin=os.environ["ORIGIN"],
        )

    prefix = os.getenv("SSM_PATH_PREFIX", "/cloudmail/prod")
    required_keys = [
        "groq/api_key",
        "mail/user",
        "mail/pass",
        "cors/origin",
    ]
    values = _fetch_ssm_parameters(region=region, names=required_keys, prefix=prefix)

    def from_ssm(key: str) -> str:
        return values[f"{prefix}/{key}"]

    return Settings(
        app_env=app_env,
        region=region,
        groq_api_key=from_ssm("groq/api_key"),
        groq_model=groq_model,
        email_user=from_ssm("mail/user"),
        email_pass=from_ssm("mail/pass"),
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        cors_origin=from_ssm("cors/origin"),
        ssm_path_prefix=prefix,
    )
