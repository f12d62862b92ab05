"""活动事件来源基类。"""

from __future__ import annotations

import abc

from stylemeter.core.score_keeper import ScoreKeeper


class ActivitySource(abc.ABC):
    """所有活动来源的抽象基类。"""

    def __init__(self, score_keeper: ScoreKeeper) -> None:
        self._score_keeper = score_keeper

    @abc.abstractmethod
    async def start(self) -> None:
        """启动采集循环。"""

    @abc.abstractmethod
    def stop(self) -> None:
        """停止采集。"""

    def publish(self, size: float) -> None:
        """把一次活动交给计分核心。"""

        self._score_keeper.record_activity(size)
