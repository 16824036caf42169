from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Shared config: camelCase on the wire, snake_case in Python, immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# --- Shapes requested from the provider ---

class ProsCons(CamelModel):
    pros: List[str] = Field(..., description="4-6 key advantages of the idea")
    cons: List[str] = Field(..., description="4-6 key drawbacks or risks of the idea")


class SWOTAnalysis(CamelModel):
    strengths: List[str]
    weaknesses: List[str]
    opportunities: List[str]
    threats: List[str]


class BCGAnalysis(CamelModel):
    category: Literal["star", "cash-cow", "question-mark", "dog"]
    market_growth: float = Field(..., description="Estimated market growth rate in percent")
    market_share: float = Field(..., description="Estimated relative market share in percent")
    reasoning: str


class BusinessModelCanvas(CamelModel):
    key_partners: List[str]
    key_activities: List[str]
    key_resources: List[str]
    value_propositions: List[str]
    customer_relationships: List[str]
    channels: List[str]
    customer_segments: List[str]
    cost_structure: List[str]
    revenue_streams: List[str]


class AnalysisMetrics(CamelModel):
    desirability: float = Field(..., ge=1, le=10)
    viability: float = Field(..., ge=1, le=10)
    feasibility: float = Field(..., ge=1, le=10)
    sustainability: float = Field(..., ge=1, le=10)


class BrandWheel(CamelModel):
    mission: str
    vision: str
    values: List[str]
    personality: List[str]


class Recommendations(CamelModel):
    startup_names: List[str]
    brand_wheel: BrandWheel
    elevator_pitch: str
    action_plan: List[str]
    improvements: List[str]


# --- Derived and assembled parts ---

class Frameworks(CamelModel):
    swot: SWOTAnalysis
    bcg: BCGAnalysis
    business_model: BusinessModelCanvas
    metrics: AnalysisMetrics


class BudgetBreakdown(CamelModel):
    development: int
    marketing: int
    operations: int
    legal: int


class BudgetEstimate(CamelModel):
    total: int
    breakdown: BudgetBreakdown
    timeline: str


class AnalysisResult(CamelModel):
    summary: str
    pros: List[str]
    cons: List[str]
    evaluation: str
    frameworks: Frameworks
    budget_estimate: BudgetEstimate
    quality_score: float
    recommendations: Recommendations

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
