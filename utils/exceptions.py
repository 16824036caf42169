from typing import Optional


class IdeaLyzerError(Exception):
    """Base class for errors raised by the analysis service."""


class ConfigurationError(IdeaLyzerError):
    """No usable provider credential is configured."""


class AnalysisError(IdeaLyzerError):
    """The prompt sequence failed on every provider that was tried."""

    def __init__(self, message: str, provider: Optional[str] = None, step: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.step = step


class ValidationError(AnalysisError):
    """A structured response did not conform to its schema."""


class AuthenticationError(AnalysisError):
    """The provider rejected the credential."""


class ExportError(IdeaLyzerError):
    """Raised while building an export; never leaves the export entry points."""
