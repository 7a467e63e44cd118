"""宛先文字列の検証。クライアント側の事前チェックとサーバー側の最終判定で共用する。"""

from __future__ import annotations

import re

from cloudmail.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RECIPIENT_SEPARATOR = ","

NO_RECIPIENTS_MESSAGE = "Please enter at least one recipient email address"


def split_recipients(raw: str) -> list[str]:
    """カンマで分割し、各要素の前後空白を除去する。"""

    return [entry.strip() for entry in raw.split(RECIPIENT_SEPARATOR)]


def find_invalid(entries: list[str]) -> list[str]:
    return [entry for entry in entries if not EMAIL_PATTERN.match(entry)]


def parse_recipients(raw: str) -> tuple[str, ...]:
    """
    カンマ区切りの宛先文字列を検証済みの宛先リストへ変換する。

    Args:
        raw: ユーザーが入力した宛先文字列

    Returns:
        入力順を保った、前後空白除去済みの宛先

    Raises:
        ValidationError: 空入力、または形式不正な宛先が 1 件以上ある場合。
            形式不正の場合は不正な宛先をすべて `invalid_entries` に持つ。
    """

    if not raw.strip():
        raise ValidationError(NO_RECIPIENTS_MESSAGE)

    entries = split_recipients(raw)
    invalid = find_invalid(entries)
    if invalid:
        raise ValidationError(format_invalid(invalid), invalid_entries=invalid)
    return tuple(entries)


def format_invalid(invalid: list[str]) -> str:
    return f"Invalid email addresses: {', '.join(invalid)}"


def join_recipients(recipients: tuple[str, ...] | list[str]) -> str:
    """検証済みリストを送信用の正規化した文字列へ戻す。"""

    return f"{RECIPIENT_SEPARATOR} ".join(recipients)
