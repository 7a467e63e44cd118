"""一定時間で消える通知のキュー。

各レーン（生成・送信）は結果を `push` するだけで、互いの状態を参照しない。
自動削除はイベントループのタイマーで行い、手動削除時にはタイマーも取り消す。
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import Callable, Literal

NotificationKind = Literal["success", "error"]
Listener = Callable[[tuple["Notification", ...]], None]

DEFAULT_DISPLAY_SECONDS = 5.0


@dataclass(slots=True, frozen=True)
class Notification:
    id: str
    message: str
    kind: NotificationKind


class NotificationQueue:
    """挿入順を保持する通知コレクション。ID はプロセス内で再利用しない。"""

    # 複数キューを作っても ID が衝突しないようクラス共有
    _ids = itertools.count(1)

    def __init__(
        self,
        *,
        display_seconds: float = DEFAULT_DISPLAY_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._display_seconds = display_seconds
        self._loop = loop
        self._items: dict[str, Notification] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._listeners: list[Listener] = []

    @property
    def items(self) -> tuple[Notification, ...]:
        """古い順のスナップショット。"""

        return tuple(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def push(
        self,
        message: str,
        kind: NotificationKind,
        *,
        display_seconds: float | None = None,
    ) -> Notification:
        """新しい ID で通知を追加し、表示時間後の自動削除を予約する。

        Raises:
            RuntimeError: ループ未指定かつ実行中のイベントループが無い場合
        """

        loop = self._loop or asyncio.get_running_loop()
        notification = Notification(id=f"toast-{next(self._ids)}", message=message, kind=kind)
        self._items[notification.id] = notification
        self._timers[notification.id] = loop.call_later(
            self._display_seconds if display_seconds is None else display_seconds,
            self._expire,
            notification.id,
        )
        self._notify()
        return notification

    def remove(self, notification_id: str) -> bool:
        """ID で削除する。既に無い ID は何もしない（冪等）。

        Returns:
            実際に削除した場合は True
        """

        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        if self._items.pop(notification_id, None) is None:
            return False
        self._notify()
        return True

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._items.clear()
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """変更通知を購読する。戻り値を呼ぶと購読解除。"""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _expire(self, notification_id: str) -> None:
        self._timers.pop(notification_id, None)
        if self._items.pop(notification_id, None) is not None:
            self._notify()

    def _notify(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)
