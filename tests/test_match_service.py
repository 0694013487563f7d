"""Unit tests for MatchService."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from app.domain.exceptions import NotFoundError
from app.domain.models import Event, Volunteer
from app.matching.engine import MatchEngine
from app.persistence.exceptions import PersistenceError
from app.services.matching import MatchService


@pytest.fixture
def sink():
    return Mock()


@pytest.fixture
def service(seeded_store, sink, scenario_clock):
    return MatchService(seeded_store, MatchEngine(notification_sink=sink), clock=scenario_clock)


class TestMatchVolunteer:
    """Tests for MatchService.match_volunteer."""

    def test_ranks_store_events(self, service, sink):
        results = service.match_volunteer(1)

        assert [r.event.event_id for r in results] == [10]
        assert results[0].match_score == 4
        sink.notify.assert_called_once_with(1, "You've been matched to Food Bank Drive!")

    def test_unknown_volunteer_raises_not_found(self, service, sink):
        with pytest.raises(NotFoundError) as exc_info:
            service.match_volunteer(999)

        assert exc_info.value.entity == "volunteer"
        sink.notify.assert_not_called()

    def test_no_events_returns_empty(self, store, sink, houston_volunteer, scenario_clock):
        store.save_volunteer(houston_volunteer)
        service = MatchService(store, MatchEngine(notification_sink=sink), clock=scenario_clock)

        assert service.match_volunteer(1) == []
        sink.notify.assert_not_called()

    def test_store_errors_propagate(self, sink):
        store = Mock()
        store.get_volunteer.side_effect = PersistenceError("database is locked")
        service = MatchService(store, MatchEngine(notification_sink=sink))

        with pytest.raises(PersistenceError):
            service.match_volunteer(1)

    def test_ties_follow_store_order(self, store, sink, scenario_clock):
        store.save_volunteer(Volunteer(volunteer_id=1, location="Houston", skills=["a", "b"]))
        store.save_event(
            Event(event_id=2, name="Later", location="Houston", required_skills=["a", "b"],
                  start_time="2024-02-01T09:00:00Z", end_time="2024-02-01T10:00:00Z")
        )
        store.save_event(
            Event(event_id=1, name="Earlier", location="Houston", required_skills=["a", "b"],
                  start_time="2024-01-01T09:00:00Z", end_time="2024-01-01T10:00:00Z")
        )
        service = MatchService(store, MatchEngine(notification_sink=sink), clock=scenario_clock)

        results = service.match_volunteer(1)

        assert [r.event.event_id for r in results] == [1, 2]
        sink.notify.assert_called_once_with(1, "You've been matched to Earlier!")

    def test_past_events_are_not_candidates(self, seeded_store, sink):
        later = lambda: datetime(2024, 2, 1, tzinfo=timezone.utc)
        service = MatchService(seeded_store, MatchEngine(notification_sink=sink), clock=later)

        assert service.match_volunteer(1) == []
        sink.notify.assert_not_called()

    def test_clock_is_passed_to_store(self, houston_volunteer, sink, scenario_clock):
        store = Mock()
        store.get_volunteer.return_value = houston_volunteer
        store.list_candidate_events.return_value = []
        service = MatchService(store, MatchEngine(notification_sink=sink), clock=scenario_clock)

        service.match_volunteer(1)

        store.list_candidate_events.assert_called_once_with(now=scenario_clock())


class TestCandidatesForEvent:
    """Tests for MatchService.candidates_for_event."""

    def test_orders_by_overlap_then_name(self, store, sink):
        store.save_event(Event(event_id=5, name="Shelter", required_skills=["a", "b", "c"]))
        store.save_volunteer(Volunteer(volunteer_id=1, full_name="Zoe", skills=["a"]))
        store.save_volunteer(Volunteer(volunteer_id=2, full_name="Bob", skills=["a", "b"]))
        store.save_volunteer(Volunteer(volunteer_id=3, full_name="Amy", skills=["c"]))
        store.save_volunteer(Volunteer(volunteer_id=4, full_name="Nobody", skills=["z"]))
        service = MatchService(store, MatchEngine(notification_sink=sink))

        candidates = service.candidates_for_event(5)

        assert [c.volunteer_id for c in candidates] == [2, 3, 1]
        assert candidates[0].overlap_count == 2
        assert candidates[0].overlapping_skills == ["a", "b"]
        sink.notify.assert_not_called()

    def test_unknown_event_raises_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.candidates_for_event(999)

        assert exc_info.value.entity == "event"

    def test_event_without_required_skills(self, store, sink):
        store.save_event(Event(event_id=5, name="Open House"))
        store.save_volunteer(Volunteer(volunteer_id=1, skills=["a"]))
        service = MatchService(store, MatchEngine(notification_sink=sink))

        assert service.candidates_for_event(5) == []

    def test_to_dict(self, service):
        candidates = service.candidates_for_event(10)

        assert candidates[0].to_dict() == {
            "volunteerId": 1,
            "fullName": "Ada Lovelace",
            "overlapCount": 1,
            "overlappingSkills": ["first-aid"],
        }
