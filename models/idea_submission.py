from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResearchPaper(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    authors: str
    doi: Optional[str] = None
    url: str
    year: Optional[int] = None
    subjects: List[str] = Field(default_factory=list)
    selected: bool = False


class IdeaSubmission(BaseModel):
    """Fields of the analysis form after their JSON-encoded parts have been decoded."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    key_features: List[str] = Field(default_factory=list)
    value_proposition: str = ""
    concept: str = ""
    background: Union[Dict[str, Any], List[Any]] = Field(default_factory=dict)
    source: str = ""
    research_data: List[ResearchPaper] = Field(default_factory=list)
