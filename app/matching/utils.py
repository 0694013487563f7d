"""Helpers for presenting match results to downstream consumers."""

from typing import Dict, Iterable, List

from app.domain.models import Event

from .models import MatchResult

MATCH_MESSAGE_TEMPLATE = "You've been matched to {event_name}!"


def build_match_message(event: Event) -> str:
    """Notification text for a volunteer matched to an event."""
    return MATCH_MESSAGE_TEMPLATE.format(event_name=event.name)


def serialize_results(results: Iterable[MatchResult]) -> List[Dict]:
    """Serialize a ranking into the JSON array returned to callers."""
    return [result.to_dict() for result in results]


def build_rationale_dict(match_result: MatchResult) -> Dict:
    """Break a score down into its components.

    Useful for logs and for explaining a ranking in notification emails.

    Args:
        match_result: MatchResult to explain

    Returns:
        Dict with:
        - event_id: Scored event
        - match_score: Total score
        - is_match: Whether the score clears the threshold
        - location_match, skill_score, availability_match, preference_bonus
        - matched_skills: Overlapping skills
    """
    return {
        "event_id": match_result.event.event_id,
        "match_score": match_result.match_score,
        "is_match": match_result.is_match,
        "location_match": match_result.location_match,
        "skill_score": match_result.skill_score,
        "availability_match": match_result.availability_match,
        "preference_bonus": match_result.preference_bonus,
        "matched_skills": list(match_result.matched_skills),
    }
