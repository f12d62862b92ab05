"""组装计分核心与可选的音频反馈，供宿主持有唯一实例。"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from stylemeter.audio import MemoryVolumeBackend, MusicPlayer, VolumeBackend
from stylemeter.audio.player import ProcessFactory
from stylemeter.config import MeterConfig, ensure_valid
from stylemeter.core.events import EventBus, EventKind, RankChangeEvent, ScoreChangeEvent, Subscription
from stylemeter.core.score_keeper import ScoreKeeper

logger = logging.getLogger(__name__)


@dataclass
class MeterSnapshot:
    """渲染层使用的只读快照。"""

    score: float
    max_score: float
    rank_index: int
    display_letter: Optional[str]
    display_word: Optional[str]
    color: Optional[str]
    progress: float

    def to_dict(self) -> dict:
        return asdict(self)


class MeterSession:
    """持有 ScoreKeeper 与 MusicPlayer。

    重新配置时先释放旧实例再构造新实例，不在原对象上修改字段，
    保证旧的定时器和监听器不会残留。通过会话注册的宿主监听器在重建后
    自动挂到新的 ScoreKeeper 上。
    """

    def __init__(
        self,
        config: Optional[MeterConfig] = None,
        volume_backend: Optional[VolumeBackend] = None,
        process_factory: Optional[ProcessFactory] = None,
    ) -> None:
        self._volume_backend = volume_backend or MemoryVolumeBackend()
        self._process_factory = process_factory
        self._started = False
        self._host_bus = EventBus()
        self._build(ensure_valid(config or MeterConfig.load_default()))

    @property
    def config(self) -> MeterConfig:
        return self._config

    @property
    def score_keeper(self) -> ScoreKeeper:
        return self._score_keeper

    def on_score_change(self, handler: Callable[[ScoreChangeEvent], None]) -> Subscription:
        return self._host_bus.subscribe(EventKind.SCORE_CHANGE, handler)

    def on_rank_change(self, handler: Callable[[RankChangeEvent], None]) -> Subscription:
        return self._host_bus.subscribe(EventKind.RANK_CHANGE, handler)

    @property
    def music_player(self) -> Optional[MusicPlayer]:
        return self._music_player

    async def start(self) -> None:
        await self._score_keeper.start()
        if self._music_player is not None:
            await self._music_player.start()
        self._started = True

    def dispose(self) -> None:
        if self._music_player is not None:
            self._music_player.dispose()
        self._score_keeper.dispose()
        self._started = False

    async def reload(self, config: MeterConfig) -> ScoreKeeper:
        """以新配置重建核心，返回新的 ScoreKeeper；旧的订阅全部失效。"""

        config = ensure_valid(config)
        was_started = self._started
        self.dispose()
        self._build(config)
        logger.info("配置已重新加载: max_score=%s ranks=%d", config.max_score, len(config.ranks))
        if was_started:
            await self.start()
        return self._score_keeper

    def record_activity(self, size: float = 1.0) -> None:
        self._score_keeper.record_activity(size)

    def snapshot(self) -> MeterSnapshot:
        keeper = self._score_keeper
        score = keeper.current_score()
        rank_index = keeper.current_rank_index()
        rank = keeper.ranks.rank_for(rank_index)
        return MeterSnapshot(
            score=score,
            max_score=keeper.ranks.max_score,
            rank_index=rank_index,
            display_letter=rank.display_letter if rank is not None else None,
            display_word=rank.display_word if rank is not None else None,
            color=rank.color.css() if rank is not None else None,
            progress=keeper.ranks.progress(score, rank_index) if rank is not None else 0.0,
        )

    def _build(self, config: MeterConfig) -> None:
        self._config = config
        self._score_keeper = ScoreKeeper(config)
        self._score_keeper.on_score_change(self._forwarder(EventKind.SCORE_CHANGE))
        self._score_keeper.on_rank_change(self._forwarder(EventKind.RANK_CHANGE))
        self._music_player: Optional[MusicPlayer] = None
        if config.music_filepath:
            self._music_player = MusicPlayer(
                config,
                self._score_keeper,
                self._volume_backend,
                process_factory=self._process_factory,
            )

    def _forwarder(self, kind: EventKind) -> Callable[[object], None]:
        def _forward(event: object) -> None:
            self._host_bus.publish(kind, event)

        return _forward
