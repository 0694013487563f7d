"""Match service: the operations a match route handler calls."""

from datetime import datetime
from typing import Callable, List, Optional

from app.domain.exceptions import NotFoundError
from app.logging import get_logger, log_context
from app.matching.engine import MatchEngine
from app.matching.models import CandidateVolunteer, MatchResult
from app.persistence.base import DataStore
from app.utils.timestamps import utc_now

logger = get_logger(__name__, component="matching")


class MatchService:
    """Looks volunteers and events up in the store and delegates to MatchEngine.

    Store errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        store: DataStore,
        engine: MatchEngine,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize MatchService.

        Args:
            store: DataStore to read volunteers and events from
            engine: MatchEngine that scores and ranks
            clock: Returns the current time; events starting before it are not candidates
        """
        self.store = store
        self.engine = engine
        self.clock = clock or utc_now

    def match_volunteer(self, volunteer_id: int) -> List[MatchResult]:
        """Rank every upcoming event for a volunteer.

        Raises:
            NotFoundError: If the volunteer does not exist
        """
        with log_context(volunteer_id=volunteer_id, operation="match"):
            volunteer = self.store.get_volunteer(volunteer_id)
            if volunteer is None:
                logger.info(
                    f"Volunteer {volunteer_id} not found",
                    extra={"event": "match.volunteer_not_found"},
                )
                raise NotFoundError("volunteer", volunteer_id)

            events = self.store.list_candidate_events(now=self.clock())
            return self.engine.rank(volunteer, events)

    def candidates_for_event(self, event_id: int) -> List[CandidateVolunteer]:
        """List volunteers whose skills overlap an event's required skills.

        Ordered by overlap count descending, then full name.

        Raises:
            NotFoundError: If the event does not exist
        """
        with log_context(event_id=event_id, operation="candidates"):
            event = self.store.get_event(event_id)
            if event is None:
                raise NotFoundError("event", event_id)

            candidates = []
            for volunteer in self.store.list_volunteers():
                held = set(volunteer.skills)
                overlapping = [skill for skill in event.required_skills if skill in held]
                if overlapping:
                    candidates.append(
                        CandidateVolunteer(
                            volunteer_id=volunteer.volunteer_id,
                            full_name=volunteer.full_name,
                            overlap_count=len(overlapping),
                            overlapping_skills=overlapping,
                        )
                    )

            candidates.sort(key=lambda c: (-c.overlap_count, c.full_name or "", c.volunteer_id))

            logger.info(
                f"Found {len(candidates)} candidate volunteers for event {event_id}",
                extra={"event": "match.candidates_listed", "candidate_count": len(candidates)},
            )
            return candidates
