import json
from pathlib import Path

import pytest

from stylemeter.config import MeterConfig, ensure_valid
from stylemeter.config_store import load_meter_config, save_user_overrides
from stylemeter.errors import ConfigurationError

from conftest import make_config


def _ranks(*thresholds: float) -> list[dict]:
    return [{"label": f"R{index}", "threshold": value} for index, value in enumerate(thresholds)]


def test_default_config_is_valid() -> None:
    config = MeterConfig.load_default()

    assert [rank.display_letter for rank in config.ranks] == ["D", "C", "B", "A", "S", "SS", "SSS"]
    assert config.reward_policy == "scaled"
    assert config.decay_policy == "proportional"
    assert config.ranks[-1].color.css() == "hsl(348, 100%, 85%)"
    assert ensure_valid(config) == config


def test_rank_aliases_are_accepted() -> None:
    config = MeterConfig.parse(
        {
            "ranks": [{"label": "D", "small_label": "ope!", "threshold": 5, "color": {"h": 10, "s": 20, "l": 30}}],
            "max_score": 10,
        }
    )

    rank = config.ranks[0]
    assert rank.display_letter == "D"
    assert rank.display_word == "ope!"
    assert rank.threshold_score == 5


def test_camel_case_small_label_alias_is_accepted() -> None:
    config = MeterConfig.parse({"ranks": [{"label": "D", "smallLabel": "ope!", "threshold": 5}], "max_score": 10})

    assert config.ranks[0].display_word == "ope!"


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        MeterConfig.parse({"ranks": _ranks(0, 20), "max_score": 40, "gain_factr": 2})

    with pytest.raises(ConfigurationError):
        MeterConfig.parse({"ranks": [{"label": "D", "threshold": 0, "colour": {"h": 1}}], "max_score": 10})


@pytest.mark.parametrize(
    "data",
    [
        {"ranks": _ranks(0, 20, 20), "max_score": 40},
        {"ranks": _ranks(0, 30, 20), "max_score": 40},
        {"ranks": _ranks(0, 20), "max_score": 20},
        {"ranks": _ranks(0, 20), "max_score": 0},
        {"ranks": _ranks(0, 20), "max_score": 40, "gain_factor": -1},
        {"ranks": _ranks(0, 20), "max_score": 40, "degradation_factor": -0.5},
        {"ranks": [], "max_score": 40},
    ],
)
def test_invalid_config_raises_configuration_error(data: dict) -> None:
    with pytest.raises(ConfigurationError):
        MeterConfig.parse(data)


def test_ensure_valid_rejects_unvalidated_instances() -> None:
    config = make_config()
    broken = MeterConfig.model_construct(**{**dict(config), "ranks": list(reversed(config.ranks))})

    with pytest.raises(ConfigurationError):
        ensure_valid(broken)


def test_from_file_reads_json(tmp_path: Path) -> None:
    path = tmp_path / "meter.json"
    path.write_text(json.dumps({"max_score": 90, "gain_factor": 2}), encoding="utf-8")

    config = MeterConfig.from_file(path)

    assert config.max_score == 90
    assert config.gain_factor == 2
    assert len(config.ranks) == 7


def test_from_file_rejects_misspelled_key(tmp_path: Path) -> None:
    path = tmp_path / "meter.json"
    path.write_text(json.dumps({"max_scroe": 10}), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        MeterConfig.from_file(path)


def test_from_file_rejects_unreadable_json(tmp_path: Path) -> None:
    path = tmp_path / "meter.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        MeterConfig.from_file(path)


def test_example_local_config_loads() -> None:
    path = Path(__file__).resolve().parents[1] / "config.local.json"

    config = MeterConfig.from_file(path)

    assert config.music_filepath is None


def test_user_overrides_merge_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    save_user_overrides({"degradation_factor": 0.5, "decay_policy": "constant"}, path=path)

    config = load_meter_config(path)

    assert config.degradation_factor == 0.5
    assert config.decay_policy == "constant"
    assert config.max_score == 80


def test_missing_user_settings_yield_defaults(tmp_path: Path) -> None:
    config = load_meter_config(tmp_path / "absent.json")

    assert config == MeterConfig.load_default()


def test_unknown_or_invalid_overrides_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_scroe": 10}), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_meter_config(path)

    with pytest.raises(ConfigurationError):
        save_user_overrides({"max_score": 50}, path=path)
