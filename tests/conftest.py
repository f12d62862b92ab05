from __future__ import annotations

from typing import Any

import pytest

from stylemeter.config import MeterConfig, RankDefinition


def make_config(**overrides: Any) -> MeterConfig:
    """D/C/B 三段位、最大 40 分的小配置。"""

    values: dict[str, Any] = {
        "ranks": [
            RankDefinition(display_letter="D", display_word="ope!", threshold_score=0),
            RankDefinition(display_letter="C", display_word="razy!", threshold_score=20),
            RankDefinition(display_letter="B", display_word="last!", threshold_score=30),
        ],
        "max_score": 40,
        "gain_factor": 1.0,
        "degradation_factor": 1.0,
    }
    values.update(overrides)
    return MeterConfig(**values)


@pytest.fixture
def config() -> MeterConfig:
    return make_config()
