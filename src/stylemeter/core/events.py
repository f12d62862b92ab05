"""分数/段位变化事件与同步通知总线。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventKind(Enum):
    """事件类型。"""

    SCORE_CHANGE = auto()
    RANK_CHANGE = auto()


@dataclass(frozen=True)
class ScoreChangeEvent:
    rank_index: int
    score: float


@dataclass(frozen=True)
class RankChangeEvent:
    rank_index: int


class Subscription:
    """订阅句柄，dispose() 仅移除对应的那一个监听器，可重复调用。"""

    def __init__(self, bus: "EventBus", kind: EventKind, handler: Handler) -> None:
        self._bus: Optional[EventBus] = bus
        self._kind = kind
        self._handler = handler

    @property
    def active(self) -> bool:
        return self._bus is not None

    def dispose(self) -> None:
        if self._bus is None:
            return
        self._bus._remove(self._kind, self)
        self._bus = None


class EventBus:
    """按事件类型分组的观察者列表，按订阅顺序同步回调。"""

    def __init__(self) -> None:
        self._subscriptions: Dict[EventKind, List[Subscription]] = {kind: [] for kind in EventKind}

    def subscribe(self, kind: EventKind, handler: Handler) -> Subscription:
        subscription = Subscription(self, kind, handler)
        self._subscriptions[kind].append(subscription)
        return subscription

    def publish(self, kind: EventKind, event: Any) -> None:
        # 复制列表，回调中取消订阅不影响本轮分发
        for subscription in list(self._subscriptions[kind]):
            if not subscription.active:
                continue
            try:
                subscription._handler(event)
            except Exception:
                logger.exception("事件监听器执行失败: kind=%s handler=%r", kind.name, subscription._handler)

    def listener_count(self, kind: EventKind) -> int:
        return len(self._subscriptions[kind])

    def clear(self) -> None:
        """断开所有监听器。"""

        for subscriptions in self._subscriptions.values():
            for subscription in list(subscriptions):
                subscription.dispose()

    def _remove(self, kind: EventKind, subscription: Subscription) -> None:
        subscriptions = self._subscriptions[kind]
        if subscription in subscriptions:
            subscriptions.remove(subscription)
