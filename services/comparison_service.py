from typing import Any, Dict, List

from pydantic import Field

from models.analysis_schema import AnalysisResult, CamelModel
from services.scoring import score_level

SORT_CRITERIA = ("qualityScore", "desirability", "viability", "feasibility")
METRIC_NAMES = ("desirability", "viability", "feasibility", "sustainability")


class SavedIdea(CamelModel):
    id: str
    title: str
    result: AnalysisResult


class ComparisonRequest(CamelModel):
    ideas: List[SavedIdea] = Field(..., min_length=1)
    sort_by: str = "qualityScore"


def _sort_value(idea: SavedIdea, sort_by: str) -> float:
    if sort_by == "qualityScore":
        return idea.result.quality_score
    return getattr(idea.result.frameworks.metrics, sort_by)


def compare_ideas(request: ComparisonRequest) -> List[Dict[str, Any]]:
    """Rank saved ideas by one criterion, highest first. Ties keep their submitted order."""
    if request.sort_by not in SORT_CRITERIA:
        raise ValueError(f"sortBy must be one of {', '.join(SORT_CRITERIA)}")

    ranked = sorted(request.ideas, key=lambda idea: _sort_value(idea, request.sort_by), reverse=True)

    comparison = []
    for rank, idea in enumerate(ranked, start=1):
        metrics = idea.result.frameworks.metrics
        scores = {"qualityScore": idea.result.quality_score}
        scores.update({name: getattr(metrics, name) for name in METRIC_NAMES})
        comparison.append({
            "rank": rank,
            "id": idea.id,
            "title": idea.title,
            "sortValue": _sort_value(idea, request.sort_by),
            "scores": scores,
            "scoreLevel": {name: score_level(value) for name, value in scores.items()},
        })
    return comparison
