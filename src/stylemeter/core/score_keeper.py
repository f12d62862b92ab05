"""计分状态机：活动加分、随时间衰减、段位推导与变化通知。"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from stylemeter.config import MeterConfig, ensure_valid
from stylemeter.core.events import (
    EventBus,
    EventKind,
    RankChangeEvent,
    ScoreChangeEvent,
    Subscription,
)
from stylemeter.core.ranks import UNRANKED, RankTable
from stylemeter.errors import StyleMeterError

logger = logging.getLogger(__name__)


class ScoreKeeper:
    """分数与段位的唯一持有者。

    所有状态变化都经过 ``apply_delta``；活动事件与衰减定时器都在同一个
    事件循环上调用它，因此每次调用（包括同步通知全部监听器）都会在下一次
    调用开始前执行完毕。
    """

    def __init__(self, config: MeterConfig) -> None:
        self._config = ensure_valid(config)
        self._ranks = RankTable.from_config(self._config)
        self._bus = EventBus()
        self._score = 0.0
        self._rank_index = UNRANKED
        self._last_activity_at = self._now()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._disposed = False

    @property
    def config(self) -> MeterConfig:
        return self._config

    @property
    def ranks(self) -> RankTable:
        return self._ranks

    @property
    def disposed(self) -> bool:
        return self._disposed

    def current_score(self) -> float:
        return self._score

    def current_rank_index(self) -> int:
        return self._rank_index

    def on_score_change(self, handler: Callable[[ScoreChangeEvent], None]) -> Subscription:
        return self._bus.subscribe(EventKind.SCORE_CHANGE, handler)

    def on_rank_change(self, handler: Callable[[RankChangeEvent], None]) -> Subscription:
        return self._bus.subscribe(EventKind.RANK_CHANGE, handler)

    async def start(self) -> None:
        """在当前事件循环上启动衰减定时器。"""

        if self._disposed:
            raise StyleMeterError("ScoreKeeper 已释放，无法再次启动")
        if self._task is not None:
            return

        self._loop = asyncio.get_running_loop()
        interval = self._config.decay_interval_seconds

        async def _decay_loop() -> None:
            while not self._disposed:
                await asyncio.sleep(interval)
                self.decay()

        self._task = asyncio.create_task(_decay_loop())
        logger.info("衰减定时器已启动，周期 %.3f 秒", interval)

    def dispose(self) -> None:
        """停止定时器并断开所有监听器，可重复调用。"""

        if self._disposed:
            return
        self._disposed = True
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._bus.clear()
        logger.info("ScoreKeeper 已释放")

    def record_activity(self, size: float = 1.0) -> None:
        """处理一次外部活动事件，size 为本次变化量（例如改动的字符数）。"""

        if self._disposed or size <= 0:
            return
        self._last_activity_at = self._now()
        self.apply_delta(self._config.gain_factor * self._reward_for(size))

    def record_activity_threadsafe(self, size: float = 1.0) -> None:
        """从其他线程投递活动事件，实际处理在事件循环线程中进行。"""

        loop = self._loop
        if loop is None or loop.is_closed():
            raise StyleMeterError("ScoreKeeper 尚未在事件循环上启动")
        loop.call_soon_threadsafe(self.record_activity, size)

    def decay(self) -> None:
        """执行一次衰减，由定时器周期性调用。"""

        if self._disposed:
            return
        self.apply_delta(-self._penalty())

    def difficulty(self) -> float:
        """难度曲线：段位越高，同样的活动换来的分数越少。"""

        ratio = (self._rank_index + 1) / len(self._ranks)
        return 1.0 + ratio * (self._config.difficulty_factor - 1.0)

    def apply_delta(self, amount: float) -> None:
        if self._disposed:
            return

        prev_score = self._score
        prev_rank_index = self._rank_index
        self._score = min(max(self._score + amount, 0.0), self._config.max_score)

        # 分数被截断后不变则不发任何事件
        if self._score == prev_score:
            return

        self._rank_index = self._ranks.rank_index_for(self._score)
        self._bus.publish(
            EventKind.SCORE_CHANGE,
            ScoreChangeEvent(rank_index=self._rank_index, score=self._score),
        )

        if self._rank_index != prev_rank_index:
            logger.info(
                "段位变化: %s -> %s (score=%.2f)",
                self._rank_label(prev_rank_index),
                self._rank_label(self._rank_index),
                self._score,
            )
            self._bus.publish(EventKind.RANK_CHANGE, RankChangeEvent(rank_index=self._rank_index))

    def _reward_for(self, size: float) -> float:
        if self._config.reward_policy == "flat":
            return 1.0
        capped = min(float(size), self._config.max_change_reward)
        return capped / self.difficulty()

    def _penalty(self) -> float:
        if self._config.decay_policy == "constant":
            return self._config.degradation_factor

        elapsed_ms = max(0.0, (self._now() - self._last_activity_at) * 1000.0)
        elapsed_ms = min(elapsed_ms, self._config.max_inactivity_seconds * 1000.0)
        return elapsed_ms * self._config.decay_acceleration * self._config.degradation_factor

    def _rank_label(self, rank_index: int) -> str:
        rank = self._ranks.rank_for(rank_index)
        return rank.display_letter if rank is not None else "-"

    def _now(self) -> float:
        return time.monotonic()
