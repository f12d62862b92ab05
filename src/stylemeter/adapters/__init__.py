"""活动事件来源适配器。"""

from .base import ActivitySource
from .simulated import SimulatedActivitySource

__all__ = [
    "ActivitySource",
    "SimulatedActivitySource",
]
