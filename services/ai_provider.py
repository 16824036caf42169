import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type

import anthropic
import openai
from langchain_anthropic import ChatAnthropic
from langchain_core.exceptions import OutputParserException
from langchain_openai import ChatOpenAI
from pydantic import ValidationError as PydanticValidationError

from config.settings import Config, ProviderCredentials
from utils.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

ANTHROPIC = "anthropic"
OPENAI = "openai"

NO_PROVIDER_MESSAGE = (
    "No AI provider API key found. Please add either ANTHROPIC_API_KEY or "
    "OPENAI_API_KEY to your environment variables."
)


class ErrorKind(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


def _status_code(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "statusCode", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    value = getattr(getattr(error, "response", None), "status_code", None)
    return value if isinstance(value, int) else None


def _error_text(error: BaseException) -> str:
    parts = [str(error)]
    for attr in ("body", "code", "type"):
        value = getattr(error, attr, None)
        if value:
            parts.append(str(value))
    return " ".join(parts).lower()


class ErrorClassifier:
    """
    Maps an exception raised by a model call to an ErrorKind.

    This is a heuristic over status codes, SDK exception classes and known
    substrings of the vendor payload. An auth error with an unfamiliar shape is
    reported as UNKNOWN (no fallback), and an unrelated message that happens to
    contain "unauthorized" is reported as AUTH (spurious fallback).
    """

    auth_error_types: Tuple[Type[BaseException], ...] = ()
    rate_limit_error_types: Tuple[Type[BaseException], ...] = ()
    auth_markers: Tuple[str, ...] = ("unauthorized", "invalid api key")
    rate_limit_markers: Tuple[str, ...] = ()

    def classify(self, error: BaseException) -> ErrorKind:
        if isinstance(error, (ValidationError, PydanticValidationError, OutputParserException)):
            return ErrorKind.VALIDATION

        status = _status_code(error)
        if status == 401 or isinstance(error, self.auth_error_types):
            return ErrorKind.AUTH
        if status == 429 or isinstance(error, self.rate_limit_error_types):
            return ErrorKind.RATE_LIMIT

        text = _error_text(error)
        if any(marker in text for marker in self.auth_markers):
            return ErrorKind.AUTH
        if any(marker in text for marker in self.rate_limit_markers):
            return ErrorKind.RATE_LIMIT
        return ErrorKind.UNKNOWN


class AnthropicErrorClassifier(ErrorClassifier):
    auth_error_types = (anthropic.AuthenticationError,)
    rate_limit_error_types = (anthropic.RateLimitError,)
    auth_markers = ErrorClassifier.auth_markers + ("authentication_error", "invalid x-api-key")
    rate_limit_markers = ("rate_limit_error",)


class OpenAIErrorClassifier(ErrorClassifier):
    auth_error_types = (openai.AuthenticationError,)
    rate_limit_error_types = (openai.RateLimitError,)
    auth_markers = ErrorClassifier.auth_markers + ("invalid_api_key", "incorrect api key")
    rate_limit_markers = ("rate_limit_exceeded",)


@dataclass(frozen=True)
class ProviderDescriptor:
    name: str
    model_factory: Callable[[str], Any]
    text_model: str
    object_model: str
    vision_model: str
    classifier: ErrorClassifier
    structured_output_kwargs: Dict[str, Any] = field(default_factory=dict)

    def text_llm(self):
        return self.model_factory(self.text_model)

    def object_llm(self, schema):
        return self.model_factory(self.object_model).with_structured_output(schema, **self.structured_output_kwargs)

    def classify(self, error: BaseException) -> ErrorKind:
        return self.classifier.classify(error)


def _anthropic_descriptor(api_key: str, settings=Config) -> ProviderDescriptor:
    def build(model_id: str) -> ChatAnthropic:
        # max_retries=0: the SDK must not retry behind the orchestrator's back
        return ChatAnthropic(
            model=model_id,
            api_key=api_key,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_REQUEST_TIMEOUT,
            max_retries=0,
        )

    return ProviderDescriptor(
        name=ANTHROPIC,
        model_factory=build,
        text_model=settings.ANTHROPIC_MODEL,
        object_model=settings.ANTHROPIC_MODEL,
        vision_model=settings.ANTHROPIC_MODEL,
        classifier=AnthropicErrorClassifier(),
    )


def _openai_descriptor(api_key: str, settings=Config) -> ProviderDescriptor:
    def build(model_id: str) -> ChatOpenAI:
        return ChatOpenAI(
            model=model_id,
            api_key=api_key,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_REQUEST_TIMEOUT,
            max_retries=0,
        )

    return ProviderDescriptor(
        name=OPENAI,
        model_factory=build,
        text_model=settings.OPENAI_MODEL,
        object_model=settings.OPENAI_MODEL,
        vision_model=settings.OPENAI_MODEL,
        classifier=OpenAIErrorClassifier(),
        # strict json_schema mode rejects the 1-10 bounds on the metrics schema
        structured_output_kwargs={"method": "function_calling"},
    )


class ProviderSelector:
    """Picks a vendor from injected credentials. Anthropic is preferred, OpenAI is the substitute."""

    def __init__(self, credentials: Optional[ProviderCredentials] = None, settings=Config):
        self.credentials = credentials if credentials is not None else settings.provider_credentials()
        self.settings = settings

    def _available(self):
        providers = []
        if self.credentials.anthropic_api_key:
            providers.append(_anthropic_descriptor(self.credentials.anthropic_api_key, self.settings))
        if self.credentials.openai_api_key:
            providers.append(_openai_descriptor(self.credentials.openai_api_key, self.settings))
        return providers

    def has_provider(self) -> bool:
        return bool(self.credentials.anthropic_api_key or self.credentials.openai_api_key)

    def select_provider(self) -> ProviderDescriptor:
        providers = self._available()
        if not providers:
            raise ConfigurationError(NO_PROVIDER_MESSAGE)
        logger.info(f"Selected AI provider: {providers[0].name}")
        return providers[0]

    def select_fallback_provider(self) -> Optional[ProviderDescriptor]:
        providers = self._available()
        return providers[1] if len(providers) > 1 else None

    def is_authentication_failure(self, error: BaseException, provider: Optional[ProviderDescriptor] = None) -> bool:
        if provider is not None:
            return provider.classify(error) is ErrorKind.AUTH
        classifiers = (AnthropicErrorClassifier(), OpenAIErrorClassifier())
        return any(c.classify(error) is ErrorKind.AUTH for c in classifiers)


# Module-level shortcuts, each reading the environment afresh

def has_provider() -> bool:
    return ProviderSelector().has_provider()


def select_provider() -> ProviderDescriptor:
    return ProviderSelector().select_provider()


def select_fallback_provider() -> Optional[ProviderDescriptor]:
    return ProviderSelector().select_fallback_provider()


def is_authentication_failure(error: BaseException, provider: Optional[ProviderDescriptor] = None) -> bool:
    return ProviderSelector(ProviderCredentials()).is_authentication_failure(error, provider)
