import copy

import pytest

from models.analysis_schema import AnalysisResult
from services.ai_provider import ANTHROPIC
from tests.fakes import CANNED_OUTPUTS, CallLog, StubSelector, make_descriptor


@pytest.fixture
def call_log():
    return CallLog()


@pytest.fixture
def anthropic_only(call_log):
    return StubSelector([make_descriptor(ANTHROPIC, call_log)])


@pytest.fixture
def canned_result_dict():
    return copy.deepcopy({
        "summary": CANNED_OUTPUTS["summary"],
        "pros": CANNED_OUTPUTS["pros_cons"]["pros"],
        "cons": CANNED_OUTPUTS["pros_cons"]["cons"],
        "evaluation": CANNED_OUTPUTS["evaluation"],
        "frameworks": {
            "swot": CANNED_OUTPUTS["swot"],
            "bcg": CANNED_OUTPUTS["bcg"],
            "businessModel": CANNED_OUTPUTS["business_model"],
            "metrics": CANNED_OUTPUTS["metrics"],
        },
        "budgetEstimate": {
            "total": 125000,
            "breakdown": {"development": 50000, "marketing": 37500, "operations": 25000, "legal": 12500},
            "timeline": "100 days",
        },
        "qualityScore": 7.7,
        "recommendations": CANNED_OUTPUTS["recommendations"],
    })


@pytest.fixture
def canned_result(canned_result_dict):
    return AnalysisResult.model_validate(canned_result_dict)


@pytest.fixture
def no_credentials(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def client():
    from app import create_app

    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()
