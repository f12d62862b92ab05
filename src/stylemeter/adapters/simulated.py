"""模拟活动来源，用于开发阶段。"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Optional

from stylemeter.adapters.base import ActivitySource
from stylemeter.core.score_keeper import ScoreKeeper

logger = logging.getLogger(__name__)


class SimulatedActivitySource(ActivitySource):
    """生成忽快忽慢的打字节奏，便于观察段位升降。"""

    def __init__(self, score_keeper: ScoreKeeper, interval: float = 0.15, seed: Optional[int] = None) -> None:
        super().__init__(score_keeper)
        self._interval = interval
        self._random = random.Random(seed)
        self._phase = 0.0
        self._task: Optional[asyncio.Task[None]] = None

    async def start(self) -> None:
        if self._task is not None:
            return

        async def _typing_loop() -> None:
            while True:
                await asyncio.sleep(self._interval)
                size = self.next_burst()
                if size > 0:
                    self.publish(size)

        self._task = asyncio.create_task(_typing_loop())
        logger.info("模拟活动来源已启动")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("模拟活动来源已停止")

    def next_burst(self) -> int:
        """下一次改动的字符数，0 表示这一拍没有输入。"""

        # 缓慢变化的打字强度，周期性出现停顿
        intensity = 0.55 + 0.45 * math.sin(self._phase)
        self._phase += 0.05
        if self._random.random() > intensity:
            return 0
        if self._random.random() < 0.05:
            return self._random.randint(20, 200)
        return self._random.randint(1, 3)
