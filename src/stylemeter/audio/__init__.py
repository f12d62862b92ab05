"""音频反馈：随分数调节音量的循环播放器。"""

from .base import MemoryVolumeBackend, VolumeBackend
from .player import MIN_VOLUME_UPDATE_SECONDS, MusicPlayer

__all__ = [
    "MIN_VOLUME_UPDATE_SECONDS",
    "MemoryVolumeBackend",
    "MusicPlayer",
    "VolumeBackend",
]
