"""stylemeter 异常类型。"""

from __future__ import annotations


class StyleMeterError(Exception):
    """所有 stylemeter 异常的基类。"""


class ConfigurationError(StyleMeterError, ValueError):
    """配置非法（段位表乱序、倍率为负、最大分数非正等）。"""
