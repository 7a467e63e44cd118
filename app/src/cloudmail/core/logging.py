"""JSONロギングの共通ヘルパー。"""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

_LOGGER = logging.getLogger("cloudmail")


def log_request(*, path: str, status: int, request_id: str, latency_ms: int) -> None:
    payload = {
        "level": "INFO",
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
    }
    _LOGGER.info(json.dumps(payload, ensure_ascii=False))


def log_error(
    *,
    path: str,
    status: int,
    request_id: str,
    error: Any,
) -> None:
    payload = {
        "level": "ERROR",
        "path": path,
        "status": status,
        "request_id": request_id,
        "error_json": _to_error_json(error),
        "traceback": traceback.format_exc(),
    }
    _LOGGER.error(json.dumps(payload, ensure_ascii=False))


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """ドメインイベント（配信の部分失敗など）を1行の JSON として出力する。"""

    payload = {"level": logging.getLevelName(level), "event": event, **fields}
    _LOGGER.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _to_error_json(error: Any) -> str:
    if isinstance(error, (dict, list)):
        return json.dumps(error, ensure_ascii=False)
    return json.dumps({"message": str(error)}, ensure_ascii=False)
