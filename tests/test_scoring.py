import pytest

from models.analysis_schema import AnalysisMetrics
from services.scoring import (
    BUDGET_RATIOS,
    DANGER,
    SUCCESS,
    WARNING,
    estimate_budget,
    quality_score,
    round_half_up,
    score_level,
)


def _metrics(d, v, f, s):
    return AnalysisMetrics(desirability=d, viability=v, feasibility=f, sustainability=s)


def test_quality_score_is_weighted_sum():
    assert quality_score(_metrics(9, 7, 8, 6)) == pytest.approx(7.7)
    assert quality_score(_metrics(10, 10, 10, 10)) == pytest.approx(10)
    assert quality_score(_metrics(1, 1, 1, 1)) == pytest.approx(1)


@pytest.mark.parametrize("values", [
    (1, 1, 1, 1),
    (10, 10, 10, 10),
    (1, 10, 1, 10),
    (3.5, 6, 8.25, 10),
    (7.3, 2.1, 9.9, 4.4),
])
def test_quality_score_stays_in_range(values):
    score = quality_score(_metrics(*values))
    expected = 0.3 * values[0] + 0.3 * values[1] + 0.25 * values[2] + 0.15 * values[3]
    assert 1 <= score <= 10
    assert score == pytest.approx(expected, abs=0.051)


@pytest.mark.parametrize("score,level", [
    (9, SUCCESS),
    (8, SUCCESS),
    (7, WARNING),
    (6, WARNING),
    (5.9, DANGER),
    (4, DANGER),
])
def test_score_level_thresholds(score, level):
    assert score_level(score) == level


def test_ratios_sum_to_one():
    assert sum(BUDGET_RATIOS.values()) == pytest.approx(1.0)


@pytest.mark.parametrize("draw", [0.0, 0.123456, 0.5, 0.777777, 0.99999999])
def test_budget_total_in_range_and_breakdown_rounded_per_category(draw):
    budget = estimate_budget(lambda: draw)

    assert 50000 <= budget.total < 200000
    for name, ratio in BUDGET_RATIOS.items():
        assert getattr(budget.breakdown, name) == round_half_up(budget.total * ratio)

    parts = budget.breakdown.development + budget.breakdown.marketing + budget.breakdown.operations + budget.breakdown.legal
    assert abs(parts - budget.total) <= 3
    assert budget.timeline == "100 days"


def test_budget_breakdown_can_miss_total():
    # 50009 splits into 20003.6, 15002.7, 10001.8, 5000.9 and every part rounds up
    budget = estimate_budget(lambda: 9 / 150000)
    assert budget.total == 50009
    parts = budget.breakdown.development + budget.breakdown.marketing + budget.breakdown.operations + budget.breakdown.legal
    assert parts == 50010


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == pytest.approx(0.3)
