"""Matching engine for ranking events against a volunteer profile.

This module provides:
- MatchEngine: scores, filters and orders candidate events
- MatchResult: score of one event with its components
- CandidateVolunteer: volunteer whose skills overlap an event
- Helpers for match messages and JSON serialization
"""

from .engine import MatchEngine
from .models import MATCH_SCORE_THRESHOLD, CandidateVolunteer, MatchResult
from .utils import build_match_message, build_rationale_dict, serialize_results

__all__ = [
    "MatchEngine",
    "MatchResult",
    "CandidateVolunteer",
    "MATCH_SCORE_THRESHOLD",
    "build_match_message",
    "build_rationale_dict",
    "serialize_results",
]
