"""下書き生成・送信パイプラインで扱う例外の体系。"""

from __future__ import annotations

from typing import Sequence


class CloudMailError(Exception):
    """呼び出し元へ返してよいメッセージを持つ基底例外。

    Args:
        message: API のエラーエンベロープにそのまま載せるメッセージ
        failed_recipients: 配信失敗時、送れなかった宛先（部分失敗の記録用）
    """

    def __init__(self, message: str, *, failed_recipients: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.failed_recipients = tuple(failed_recipients)


class ValidationError(CloudMailError, ValueError):
    """ユーザー入力の欠落・不正。システム障害としては扱わない。"""

    def __init__(self, message: str, invalid_entries: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.invalid_entries = tuple(invalid_entries)


class ProviderError(CloudMailError):
    """生成/配信プロバイダが明示的なエラーを返した。"""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        failed_recipients: Sequence[str] = (),
    ) -> None:
        super().__init__(message, failed_recipients=failed_recipients)
        self.status_code = status_code


class ConnectivityError(CloudMailError):
    """プロバイダへ到達できなかった。"""


class AuthenticationError(CloudMailError):
    """配信プロバイダが資格情報を拒否した。設定不備を意味する。"""


class InternalError(CloudMailError):
    """リクエスト構築・解析中の想定外エラー。詳細はサーバーログのみに残す。"""
