import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from langchain_core.exceptions import OutputParserException
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config.settings import Config
from models.analysis_schema import (
    AnalysisMetrics,
    AnalysisResult,
    BCGAnalysis,
    BusinessModelCanvas,
    Frameworks,
    ProsCons,
    Recommendations,
    SWOTAnalysis,
)
from services.ai_provider import ErrorKind, ProviderDescriptor, ProviderSelector
from services.analysis_prompts import SYSTEM_ROLE, build_prompt
from services.scoring import estimate_budget, quality_score
from utils.exceptions import AnalysisError, AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

# Issued one after another in this order; none reads another's output
ANALYSIS_STEPS = (
    "summary",
    "evaluation",
    "pros_cons",
    "swot",
    "bcg",
    "business_model",
    "metrics",
    "recommendations",
)

STRUCTURED_SCHEMAS = {
    "pros_cons": ProsCons,
    "swot": SWOTAnalysis,
    "bcg": BCGAnalysis,
    "business_model": BusinessModelCanvas,
    "metrics": AnalysisMetrics,
    "recommendations": Recommendations,
}


@dataclass(frozen=True)
class RetryPolicy:
    """Retries of a single step after a rate-limit error. Zero retries means none at all."""

    max_retries: int = 0
    wait_seconds: float = 5.0

    @classmethod
    def from_config(cls, settings=Config) -> "RetryPolicy":
        return cls(max_retries=settings.LLM_TRANSIENT_RETRIES, wait_seconds=settings.LLM_RETRY_WAIT_SECONDS)


class StepFailure(Exception):
    """A step of the sequence raised; keeps the raw error for classification."""

    def __init__(self, provider: ProviderDescriptor, step: str, error: BaseException):
        super().__init__(f"Step '{step}' failed on {provider.name}: {error}")
        self.provider = provider
        self.step = step
        self.error = error


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Anthropic can answer with a list of content blocks
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return str(content).strip()


def _validate(schema, raw: Any, provider: ProviderDescriptor, step: str):
    if raw is None:
        raise ValidationError(
            f"Provider returned no structured output for step '{step}'", provider=provider.name, step=step
        )
    if isinstance(raw, schema):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    return schema.model_validate(raw)


class AnalysisService:
    def __init__(
        self,
        selector: ProviderSelector,
        retry_policy: Optional[RetryPolicy] = None,
        random_fn: Callable[[], float] = random.random,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.selector = selector
        self.retry_policy = retry_policy or RetryPolicy()
        self.random_fn = random_fn
        self.sleep = sleep

    async def run_analysis(self, idea_context: str, has_research: bool = False) -> AnalysisResult:
        """
        Run the full prompt sequence and assemble the result.

        An authentication failure on the primary provider reruns the whole
        sequence once on the fallback provider, when one is configured. Every
        other failure ends the analysis; no partial result is returned.
        """
        start_time = time.time()
        primary = self.selector.select_provider()

        try:
            outputs = await self._run_sequence(primary, idea_context, has_research)
        except StepFailure as failure:
            fallback = self.selector.select_fallback_provider()
            if fallback is None or not self.selector.is_authentication_failure(failure.error, primary):
                raise self._to_analysis_error(failure) from failure.error

            logger.warning(
                f"Authentication failed on {primary.name} at step '{failure.step}', "
                f"retrying the full analysis on {fallback.name}"
            )
            try:
                outputs = await self._run_sequence(fallback, idea_context, has_research)
            except StepFailure as second_failure:
                raise self._to_analysis_error(second_failure) from second_failure.error

        result = self._assemble(outputs)
        logger.info(
            f"Analysis completed in {time.time() - start_time:.2f}s "
            f"(quality score {result.quality_score}/10)"
        )
        return result

    async def _run_sequence(self, provider: ProviderDescriptor, idea_context: str, has_research: bool) -> Dict[str, Any]:
        outputs: Dict[str, Any] = {}
        for step in ANALYSIS_STEPS:
            try:
                outputs[step] = await self._run_step(provider, step, idea_context, has_research)
            except Exception as e:
                logger.warning(f"   ✗ Step '{step}' on {provider.name} failed ({provider.classify(e).value}): {e}")
                raise StepFailure(provider, step, e) from e
        return outputs

    async def _run_step(self, provider: ProviderDescriptor, step: str, idea_context: str, has_research: bool):
        messages = [
            SystemMessage(content=SYSTEM_ROLE),
            HumanMessage(content=build_prompt(step, idea_context, has_research)),
        ]
        attempt = 0
        wait_time = self.retry_policy.wait_seconds

        while True:
            start_time = time.time()
            try:
                output = await self._invoke(provider, step, messages)
                logger.info(f"   ✓ Step '{step}' on {provider.name} done in {time.time() - start_time:.2f}s")
                return output
            except Exception as e:
                if provider.classify(e) is not ErrorKind.RATE_LIMIT or attempt >= self.retry_policy.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    f"   ! Rate limit on step '{step}' (attempt {attempt}/{self.retry_policy.max_retries}). "
                    f"Retrying in {wait_time}s..."
                )
                await self.sleep(wait_time)
                wait_time *= 2

    async def _invoke(self, provider: ProviderDescriptor, step: str, messages):
        schema = STRUCTURED_SCHEMAS.get(step)
        if schema is None:
            response = await provider.text_llm().ainvoke(messages)
            return _message_text(response)

        llm = provider.object_llm(schema)
        raw = await llm.ainvoke(messages)
        try:
            return _validate(schema, raw, provider, step)
        except (PydanticValidationError, OutputParserException) as e:
            raise ValidationError(
                f"Response for step '{step}' did not match {schema.__name__}: {e}",
                provider=provider.name,
                step=step,
            ) from e

    def _to_analysis_error(self, failure: StepFailure) -> AnalysisError:
        error = failure.error
        if isinstance(error, AnalysisError):
            return error

        kind = failure.provider.classify(error)
        message = f"Analysis failed at step '{failure.step}' on {failure.provider.name}: {error}"
        if kind is ErrorKind.AUTH:
            return AuthenticationError(message, provider=failure.provider.name, step=failure.step)
        if kind is ErrorKind.VALIDATION:
            return ValidationError(message, provider=failure.provider.name, step=failure.step)
        return AnalysisError(message, provider=failure.provider.name, step=failure.step)

    def _assemble(self, outputs: Dict[str, Any]) -> AnalysisResult:
        pros_cons: ProsCons = outputs["pros_cons"]
        metrics: AnalysisMetrics = outputs["metrics"]
        return AnalysisResult(
            summary=outputs["summary"],
            pros=pros_cons.pros,
            cons=pros_cons.cons,
            evaluation=outputs["evaluation"],
            frameworks=Frameworks(
                swot=outputs["swot"],
                bcg=outputs["bcg"],
                business_model=outputs["business_model"],
                metrics=metrics,
            ),
            budget_estimate=estimate_budget(self.random_fn),
            quality_score=quality_score(metrics),
            recommendations=outputs["recommendations"],
        )


def get_analysis_service() -> AnalysisService:
    """Build a service from the credentials present right now."""
    return AnalysisService(ProviderSelector(Config.provider_credentials()), retry_policy=RetryPolicy.from_config())
