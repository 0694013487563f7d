"""Configuration errors raised while loading config files and environment."""

from typing import List, Optional

from app.domain.exceptions import VolunteerMatcherError


class ConfigurationError(VolunteerMatcherError):
    """Invalid or missing configuration.

    Carries every validation problem found plus hints for fixing them, so a
    single run reports everything wrong with config.yaml and the environment.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [self.message]
        if self.errors:
            lines.append("\nValidation Errors:")
            lines.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))
        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  - {hint}" for hint in self.suggestions)
        return "\n".join(lines)
