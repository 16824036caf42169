import math
import random
from typing import Callable

from models.analysis_schema import AnalysisMetrics, BudgetBreakdown, BudgetEstimate

METRIC_WEIGHTS = {
    "desirability": 0.3,
    "viability": 0.3,
    "feasibility": 0.25,
    "sustainability": 0.15,
}

BUDGET_RATIOS = {
    "development": 0.4,
    "marketing": 0.3,
    "operations": 0.2,
    "legal": 0.1,
}

BUDGET_MIN = 50000
BUDGET_SPREAD = 150000
BUDGET_TIMELINE = "100 days"

SUCCESS = "success"
WARNING = "warning"
DANGER = "danger"


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def quality_score(metrics: AnalysisMetrics) -> float:
    """Weighted sum of the four metrics, rounded to one decimal."""
    raw = sum(getattr(metrics, name) * weight for name, weight in METRIC_WEIGHTS.items())
    return round_half_up(raw, 1)


def score_level(score: float) -> str:
    """Colour band for any 1-10 score. Every view of a score must go through here."""
    if score >= 8:
        return SUCCESS
    if score >= 6:
        return WARNING
    return DANGER


def estimate_budget(random_fn: Callable[[], float] = random.random) -> BudgetEstimate:
    """
    Placeholder budget: a uniform figure unrelated to the analysis, split by fixed ratios.

    Each category is rounded on its own, so the breakdown can miss the total by a
    few units. That gap is left as it is.
    """
    total = int(round_half_up(BUDGET_MIN + random_fn() * BUDGET_SPREAD))
    # rounding can reach the upper bound when random_fn() is just below 1
    total = min(total, BUDGET_MIN + BUDGET_SPREAD - 1)

    breakdown = BudgetBreakdown(
        **{name: int(round_half_up(total * ratio)) for name, ratio in BUDGET_RATIOS.items()}
    )
    return BudgetEstimate(total=total, breakdown=breakdown, timeline=BUDGET_TIMELINE)
