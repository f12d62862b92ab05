"""stylemeter：把活动事件转换为随时间衰减的分数与段位。"""

__version__ = "0.1.0"
