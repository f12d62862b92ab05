"""段位表：分数到段位索引的映射。"""

from __future__ import annotations

from typing import Optional, Sequence

from stylemeter.config import MeterConfig, RankDefinition

# 低于最低段位时的索引
UNRANKED = -1


class RankTable:
    """按阈值升序排列的不可变段位表。

    阈值严格递增由 MeterConfig 在加载时保证，因此相邻段位之间的进度
    分母永远不为零。
    """

    def __init__(self, ranks: Sequence[RankDefinition], max_score: float) -> None:
        self._ranks: tuple[RankDefinition, ...] = tuple(ranks)
        self._max_score = float(max_score)

    @classmethod
    def from_config(cls, config: MeterConfig) -> "RankTable":
        return cls(config.ranks, config.max_score)

    def __len__(self) -> int:
        return len(self._ranks)

    def __iter__(self):
        return iter(self._ranks)

    @property
    def max_score(self) -> float:
        return self._max_score

    def rank_for(self, rank_index: int) -> Optional[RankDefinition]:
        if rank_index == UNRANKED:
            return None
        return self._ranks[rank_index]

    def rank_index_for(self, score: float) -> int:
        """返回分数所属段位；分数必须严格大于阈值才算达到该段位。"""

        for index in range(len(self._ranks) - 1, -1, -1):
            if score > self._ranks[index].threshold_score:
                return index
        return UNRANKED

    def threshold_for(self, rank_index: int) -> float:
        if rank_index == UNRANKED:
            return 0.0
        return self._ranks[rank_index].threshold_score

    def next_threshold(self, rank_index: int) -> float:
        """下一段位的阈值，最高段位时返回最大分数。"""

        if rank_index + 1 >= len(self._ranks):
            return self._max_score
        return self._ranks[rank_index + 1].threshold_score

    def progress(self, score: float, rank_index: int) -> float:
        """当前段位内的进度，范围 [0, 1]，供渲染层绘制进度条。"""

        current = self.threshold_for(rank_index)
        span = self.next_threshold(rank_index) - current
        if span <= 0:
            return 0.0
        return min(1.0, max(0.0, (score - current) / span))
