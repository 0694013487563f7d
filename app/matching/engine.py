"""Scoring engine ranking candidate events for a volunteer.

Each event is scored independently as the sum of four components:
1. Location: exact, case-sensitive equality (1 or 0)
2. Skills: number of event skills the volunteer holds
3. Availability: 1 if the volunteer's window contains the event's, else 0
4. Preference: 1 if the event's tag is among the volunteer's preferences

Events scoring above MATCH_SCORE_THRESHOLD are returned best first. Equal
scores keep their input order. When anything is returned, the volunteer is
notified once about the top event.
"""

from typing import Iterable, List, Optional

from app.domain.models import Event, Volunteer
from app.logging import get_logger, log_context

from .models import MATCH_SCORE_THRESHOLD, MatchResult
from .utils import build_match_message

logger = get_logger(__name__, component="matching")


class MatchEngine:
    """Scores, filters and orders events for a volunteer.

    The engine keeps no state between calls. The only side effect of rank()
    is the notification handed to the sink, and a failing sink never changes
    the returned ranking.
    """

    def __init__(self, notification_sink=None, threshold: int = MATCH_SCORE_THRESHOLD):
        """Initialize MatchEngine.

        Args:
            notification_sink: Object with notify(volunteer_id, message); None disables notifying
            threshold: Results must score strictly above this value
        """
        self.notification_sink = notification_sink
        self.threshold = threshold

    def score(self, volunteer: Volunteer, event: Event) -> MatchResult:
        """Score a single event for a volunteer.

        Malformed or missing data scores 0 for the affected component.

        Args:
            volunteer: Volunteer profile
            event: Candidate event

        Returns:
            MatchResult with the total and every component
        """
        location_match = 1 if volunteer.location == event.location else 0

        volunteer_skills = set(volunteer.skills)
        matched_skills = [skill for skill in event.required_skills if skill in volunteer_skills]
        skill_score = len(matched_skills)

        availability_match = (
            1 if volunteer.availability.contains(event.start_time, event.end_time) else 0
        )

        preference_bonus = (
            1
            if event.preference_tag is not None and event.preference_tag in volunteer.preferences
            else 0
        )

        return MatchResult(
            event=event,
            match_score=location_match + skill_score + availability_match + preference_bonus,
            matched_skills=matched_skills,
            location_match=location_match,
            skill_score=skill_score,
            availability_match=availability_match,
            preference_bonus=preference_bonus,
            threshold=self.threshold,
        )

    def rank(self, volunteer: Volunteer, candidate_events: Iterable[Event]) -> List[MatchResult]:
        """Rank candidate events for a volunteer and notify about the best one.

        Args:
            volunteer: Volunteer profile
            candidate_events: Events to consider, in the order ties should keep

        Returns:
            Results scoring above the threshold, highest score first
        """
        with log_context(volunteer_id=volunteer.volunteer_id):
            scored = [self.score(volunteer, event) for event in candidate_events]

            # sorted() is stable, so equal scores keep input order
            ranked = sorted(
                (result for result in scored if result.is_match),
                key=lambda result: result.match_score,
                reverse=True,
            )

            logger.info(
                f"Ranked {len(ranked)} of {len(scored)} events for volunteer {volunteer.volunteer_id}",
                extra={
                    "event": "match.ranked",
                    "candidate_count": len(scored),
                    "match_count": len(ranked),
                    "top_event_id": ranked[0].event.event_id if ranked else None,
                    "top_score": ranked[0].match_score if ranked else None,
                },
            )

            if ranked:
                self._dispatch_notification(volunteer, ranked[0])

        return ranked

    def _dispatch_notification(self, volunteer: Volunteer, top: MatchResult) -> Optional[bool]:
        """Notify the volunteer about the top match.

        Returns:
            True if the sink accepted the notification, False if it failed,
            None when no sink is configured
        """
        if self.notification_sink is None:
            return None

        message = build_match_message(top.event)
        try:
            self.notification_sink.notify(volunteer.volunteer_id, message)
        except Exception as e:
            logger.error(
                f"Failed to notify volunteer {volunteer.volunteer_id}: {e}",
                extra={
                    "event": "match.notification.failed",
                    "error_type": "dependency",
                    "event_id": top.event.event_id,
                },
                exc_info=True,
            )
            return False

        logger.debug(
            "Match notification dispatched",
            extra={"event": "match.notification.sent", "event_id": top.event.event_id},
        )
        return True
