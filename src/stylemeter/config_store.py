"""简易配置存储，支持加载/保存用户自定义设置。"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from stylemeter.config import MeterConfig
from stylemeter.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".stylemeter" / "config.json"


def load_user_overrides(path: Optional[Path] = None) -> dict[str, Any]:
    """读取用户覆盖项；文件缺失或损坏时返回空字典。"""

    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("无法读取用户设置 %s，使用默认配置", cfg_path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("用户设置 %s 格式错误，使用默认配置", cfg_path)
        return {}
    return data


def load_meter_config(path: Optional[Path] = None) -> MeterConfig:
    """把用户覆盖项合并到默认配置上。

    合并后的配置若不合法（例如段位阈值乱序）直接抛出 ConfigurationError，
    不会悄悄回退到默认值。
    """

    base = MeterConfig.load_default().model_dump()
    overrides = load_user_overrides(path)
    unknown = sorted(set(overrides) - set(base))
    if unknown:
        raise ConfigurationError(f"未知配置项: {', '.join(unknown)}")
    base.update(overrides)
    return MeterConfig.parse(base)


def save_user_overrides(overrides: dict[str, Any], path: Optional[Path] = None) -> None:
    cfg_path = path or DEFAULT_CONFIG_PATH
    # 先校验再落盘
    merged = MeterConfig.load_default().model_dump()
    merged.update(overrides)
    MeterConfig.parse(merged)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(json.dumps(overrides, ensure_ascii=False, indent=2), encoding="utf-8")
