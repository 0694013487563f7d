"""Domain-level error taxonomy.

- NotFoundError: an unknown volunteer or event (404-equivalent for callers)
- ValidationError: structurally malformed input at a data boundary
- DependencyError: a collaborator (store, notification channel) is unavailable

Malformed availability or skill values inside an otherwise valid record are
not errors; they degrade to non-matches.
"""

from typing import List, Optional


class VolunteerMatcherError(Exception):
    """Base exception for all domain errors."""

    pass


class NotFoundError(VolunteerMatcherError):
    """Raised when a referenced volunteer or event does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}")


class ValidationError(VolunteerMatcherError):
    """Raised when input records are structurally malformed.

    Stores the individual problems so they can be reported together.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.errors:
            return self.message
        lines = [self.message]
        for i, error in enumerate(self.errors, 1):
            lines.append(f"  {i}. {error}")
        return "\n".join(lines)


class DependencyError(VolunteerMatcherError):
    """Raised when the store or a notification channel is unavailable."""

    pass
