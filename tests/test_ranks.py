import pytest

from stylemeter.config import MeterConfig
from stylemeter.core.ranks import UNRANKED, RankTable

from conftest import make_config


def _table() -> RankTable:
    return RankTable.from_config(make_config())


def test_rank_index_requires_score_strictly_above_threshold() -> None:
    table = _table()

    assert table.rank_index_for(0) == UNRANKED
    assert table.rank_index_for(0.001) == 0
    assert table.rank_index_for(20) == 0
    assert table.rank_index_for(20.001) == 1
    assert table.rank_index_for(30) == 1
    assert table.rank_index_for(30.5) == 2
    assert table.rank_index_for(40) == 2


def test_rank_index_is_monotonic_in_score() -> None:
    table = _table()
    previous = UNRANKED
    score = 0.0
    while score <= 40.0:
        current = table.rank_index_for(score)
        assert current >= previous
        previous = current
        score += 0.25


def test_next_threshold_falls_back_to_max_score_for_top_rank() -> None:
    table = _table()

    assert table.next_threshold(UNRANKED) == 0
    assert table.next_threshold(0) == 20
    assert table.next_threshold(1) == 30
    assert table.next_threshold(2) == 40


def test_progress_within_rank() -> None:
    table = _table()

    assert table.progress(25, 1) == pytest.approx(0.5)
    assert table.progress(35, 2) == pytest.approx(0.5)
    assert table.progress(0, UNRANKED) == 0.0


def test_default_table_has_seven_ranks() -> None:
    table = RankTable.from_config(MeterConfig.load_default())

    assert len(table) == 7
    assert table.max_score == 80
    assert table.rank_index_for(10) == UNRANKED
    assert table.rank_index_for(71) == 6
    assert table.rank_for(6).display_letter == "SSS"
    assert table.rank_for(UNRANKED) is None
