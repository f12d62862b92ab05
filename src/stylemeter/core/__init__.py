"""核心业务逻辑：段位表、计分状态机与变化通知。"""

from .events import EventBus, EventKind, RankChangeEvent, ScoreChangeEvent, Subscription
from .ranks import UNRANKED, RankTable
from .score_keeper import ScoreKeeper

__all__ = [
    "EventBus",
    "EventKind",
    "RankChangeEvent",
    "RankTable",
    "ScoreChangeEvent",
    "ScoreKeeper",
    "Subscription",
    "UNRANKED",
]
