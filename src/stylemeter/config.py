"""应用配置模型。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from stylemeter.errors import ConfigurationError


class HSLColor(BaseModel):
    """段位显示颜色（HSL）。"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    h: float = Field(0.0, ge=0.0, le=360.0)
    s: float = Field(0.0, ge=0.0, le=100.0)
    l: float = Field(0.0, ge=0.0, le=100.0)

    def css(self) -> str:
        return f"hsl({self.h:g}, {self.s:g}%, {self.l:g}%)"


class RankDefinition(BaseModel):
    """单个段位定义，加载后不可变。"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    display_letter: str = Field(validation_alias=AliasChoices("display_letter", "label", "text"))
    display_word: str = Field("", validation_alias=AliasChoices("display_word", "small_label", "smallLabel", "smallText"))
    threshold_score: float = Field(ge=0.0, validation_alias=AliasChoices("threshold_score", "threshold", "score"))
    color: HSLColor = Field(default_factory=HSLColor)


class MeterConfig(BaseModel):
    """计分、衰减与音频反馈的总配置。"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ranks: list[RankDefinition] = Field(min_length=1)
    max_score: float = Field(80.0, gt=0.0)
    gain_factor: float = Field(1.0, ge=0.0)
    degradation_factor: float = Field(1.0, ge=0.0)

    reward_policy: Literal["scaled", "flat"] = "scaled"
    decay_policy: Literal["proportional", "constant"] = "proportional"
    max_change_reward: float = Field(5.0, gt=0.0)
    difficulty_factor: float = Field(2.0, ge=1.0)
    decay_interval_seconds: float = Field(0.5, gt=0.0)
    # 每闲置 1 毫秒在单次衰减中扣除的分数
    decay_acceleration: float = Field(0.0001, ge=0.0)
    max_inactivity_seconds: float = Field(100.0, gt=0.0)

    music_filepath: Optional[str] = None
    max_volume: float = Field(0.15, ge=0.0, le=1.0)
    player_command: list[str] = Field(default_factory=lambda: ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"])

    @model_validator(mode="after")
    def _check_rank_table(self) -> "MeterConfig":
        previous: Optional[float] = None
        for rank in self.ranks:
            if previous is not None and rank.threshold_score <= previous:
                raise ValueError(
                    f"段位阈值必须严格递增: {rank.display_letter} 的阈值 {rank.threshold_score:g} <= {previous:g}"
                )
            previous = rank.threshold_score
        if previous is not None and previous >= self.max_score:
            raise ValueError(f"最高段位阈值 {previous:g} 必须小于最大分数 {self.max_score:g}")
        return self

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "MeterConfig":
        """校验原始字典，失败时抛出 ConfigurationError。"""

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def load_default(cls) -> "MeterConfig":
        """返回内置的七段位配置。"""

        return cls(ranks=[RankDefinition.model_validate(rank) for rank in DEFAULT_RANKS])

    @classmethod
    def from_file(cls, path: Path) -> "MeterConfig":
        """从 JSON 文件解析配置，未给出的段位表沿用默认值。"""

        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"无法读取配置文件 {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"配置文件 {path} 顶层必须是对象")
        data.setdefault("ranks", DEFAULT_RANKS)
        return cls.parse(data)


def ensure_valid(config: MeterConfig) -> MeterConfig:
    """重新校验配置，拦截绕过校验（如 model_construct）构造的实例。"""

    return MeterConfig.parse(config.model_dump())


DEFAULT_RANKS: list[dict[str, Any]] = [
    {"display_letter": "D", "display_word": "ope!", "threshold_score": 10, "color": {"h": 180, "s": 30, "l": 65}},
    {"display_letter": "C", "display_word": "razy!", "threshold_score": 20, "color": {"h": 150, "s": 30, "l": 70}},
    {"display_letter": "B", "display_word": "last!", "threshold_score": 30, "color": {"h": 68, "s": 30, "l": 70}},
    {"display_letter": "A", "display_word": "lright!", "threshold_score": 40, "color": {"h": 23, "s": 35, "l": 70}},
    {"display_letter": "S", "display_word": "weet!", "threshold_score": 50, "color": {"h": 47, "s": 35, "l": 75}},
    {"display_letter": "SS", "display_word": "howtime!!", "threshold_score": 60, "color": {"h": 296, "s": 35, "l": 80}},
    {"display_letter": "SSS", "display_word": "tylish!!!", "threshold_score": 70, "color": {"h": 348, "s": 100, "l": 85}},
]
