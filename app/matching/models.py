"""Data models for the matching engine.

MatchResult is a transient view produced per request; it is never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.domain.models import Event

# Results must score strictly above this to be returned
MATCH_SCORE_THRESHOLD = 2


@dataclass
class MatchResult:
    """Score of one event for one volunteer.

    Attributes:
        event: The scored event
        match_score: Sum of the four components below
        matched_skills: Skills both required by the event and held by the
            volunteer, in the event's required-skill order
        location_match: 1 if the locations are identical, else 0
        skill_score: Number of matched skills
        availability_match: 1 if the volunteer's window contains the event, else 0
        preference_bonus: 1 if the event's preference tag is one of the
            volunteer's preferences, else 0
        threshold: Score the result must exceed to count as a match
    """

    event: Event
    match_score: int = 0
    matched_skills: List[str] = field(default_factory=list)
    location_match: int = 0
    skill_score: int = 0
    availability_match: int = 0
    preference_bonus: int = 0
    threshold: int = MATCH_SCORE_THRESHOLD

    @property
    def is_match(self) -> bool:
        """Whether the score clears the threshold."""
        return self.match_score > self.threshold

    def to_dict(self) -> Dict[str, Any]:
        """Event fields plus matchScore and matchedSkills, JSON-ready."""
        payload = self.event.model_dump(mode="json")
        payload["matchScore"] = self.match_score
        payload["matchedSkills"] = list(self.matched_skills)
        return payload


@dataclass
class CandidateVolunteer:
    """A volunteer whose skills overlap an event's required skills.

    Attributes:
        volunteer_id: Volunteer identifier
        full_name: Display name (may be None)
        overlap_count: Number of overlapping skills
        overlapping_skills: The overlapping skills, in the event's order
    """

    volunteer_id: int
    full_name: Optional[str]
    overlap_count: int
    overlapping_skills: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volunteerId": self.volunteer_id,
            "fullName": self.full_name,
            "overlapCount": self.overlap_count,
            "overlappingSkills": list(self.overlapping_skills),
        }
