"""stylemeter 演示入口。"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

# 确保 src 加入路径
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from scripts.dev_server import main as run_dev_server
from stylemeter.config_store import load_meter_config
from stylemeter.errors import ConfigurationError
from stylemeter.service import MeterSession


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")

    try:
        config = load_meter_config()
    except ConfigurationError as exc:
        logging.getLogger(__name__).error("配置无效，拒绝启动: %s", exc)
        sys.exit(1)

    logging.getLogger(__name__).info(
        "段位数=%d 最大分数=%s 加分倍率=%s 衰减倍率=%s",
        len(config.ranks),
        config.max_score,
        config.gain_factor,
        config.degradation_factor,
    )
    asyncio.run(run_dev_server(session=MeterSession(config)))


if __name__ == "__main__":
    main()
