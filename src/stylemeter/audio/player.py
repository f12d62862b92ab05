"""背景音乐循环播放，音量随分数变化。"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Awaitable, Callable, Optional

from stylemeter.audio.base import VolumeBackend
from stylemeter.config import MeterConfig
from stylemeter.core.events import ScoreChangeEvent, Subscription
from stylemeter.core.score_keeper import ScoreKeeper
from stylemeter.errors import ConfigurationError

logger = logging.getLogger(__name__)

# 音量是进程级的全局副作用，限制写入频率
MIN_VOLUME_UPDATE_SECONDS = 0.2

ProcessFactory = Callable[..., Awaitable[asyncio.subprocess.Process]]


async def _spawn_player(*command: str) -> asyncio.subprocess.Process:
    return await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )


class MusicPlayer:
    """监听分数变化调节音量，并循环播放配置的音乐文件。

    音频子系统的任何失败只记录日志，不会影响 ScoreKeeper。
    """

    def __init__(
        self,
        config: MeterConfig,
        score_keeper: ScoreKeeper,
        backend: VolumeBackend,
        process_factory: Optional[ProcessFactory] = None,
    ) -> None:
        if not config.music_filepath:
            raise ConfigurationError("未配置 music_filepath 时不应创建 MusicPlayer")
        self._config = config
        self._score_keeper = score_keeper
        self._backend = backend
        self._process_factory = process_factory or _spawn_player
        self._subscription: Optional[Subscription] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._process: Optional[asyncio.subprocess.Process] = None
        self._prev_volume: Optional[float] = None
        self._last_volume_update_at: Optional[float] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._stopped or self._task is not None:
            return

        self._subscription = self._score_keeper.on_score_change(self.update_volume)
        try:
            self._prev_volume = self._backend.get()
            self._backend.set(0.0)
        except Exception:
            logger.warning("无法读取或设置系统音量", exc_info=True)

        self._task = asyncio.create_task(self._loop_audio())

    def update_volume(self, event: ScoreChangeEvent) -> None:
        now = self._now()
        if (
            self._last_volume_update_at is not None
            and now - self._last_volume_update_at < MIN_VOLUME_UPDATE_SECONDS
        ):
            return

        volume = (event.score / self._config.max_score) * self._config.max_volume
        try:
            self._backend.set(volume)
        except Exception:
            logger.warning("设置音量失败: %.3f", volume, exc_info=True)
            return
        self._last_volume_update_at = now

    def dispose(self) -> None:
        """停止播放并恢复原音量，可重复调用。"""

        if self._stopped:
            return
        self._stopped = True

        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

        process = self._process
        if process is not None and process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.terminate()
        self._process = None

        if self._task is not None:
            self._task.cancel()
            self._task = None

        if self._prev_volume is not None:
            try:
                self._backend.set(self._prev_volume)
            except Exception:
                logger.warning("恢复音量失败", exc_info=True)

    async def _loop_audio(self) -> None:
        assert self._config.music_filepath is not None
        command = [*self._config.player_command, self._config.music_filepath]

        # 正常结束（退出码 0）才重新播放，dispose 之后不再重启
        while not self._stopped:
            try:
                process = await self._process_factory(*command)
            except Exception as exc:
                logger.warning("音频进程启动失败: %s", exc)
                return

            # 启动期间已被 dispose
            if self._stopped:
                with contextlib.suppress(ProcessLookupError):
                    process.terminate()
                return

            self._process = process
            returncode = await process.wait()
            self._process = None

            if returncode != 0:
                if not self._stopped:
                    logger.warning("音频进程异常退出 (code=%s)，停止循环播放", returncode)
                return

    def _now(self) -> float:
        return time.monotonic()
