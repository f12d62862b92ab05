"""音量控制抽象基类。"""

from __future__ import annotations

import abc


class VolumeBackend(abc.ABC):
    """音量接口，未来支持不同平台实现。"""

    @abc.abstractmethod
    def get(self) -> float:
        """读取当前音量，范围 [0, 1]。"""

        raise NotImplementedError

    @abc.abstractmethod
    def set(self, volume: float) -> None:
        """设置音量，范围 [0, 1]。"""

        raise NotImplementedError


class MemoryVolumeBackend(VolumeBackend):
    """仅在内存中记录音量，用于无音频设备的环境与测试。"""

    def __init__(self, initial: float = 0.5) -> None:
        self.volume = initial
        self.history: list[float] = []

    def get(self) -> float:
        return self.volume

    def set(self, volume: float) -> None:
        self.volume = volume
        self.history.append(volume)
