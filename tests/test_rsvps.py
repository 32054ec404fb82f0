"""
Tests for RSVPs and attendance aggregation.

Covers upsert idempotence, changing an answer, viewer_response, attendee
resolution, batch aggregation and the access check on every path.
"""

from __future__ import annotations

import pytest

from irlly.core.exceptions import NotFoundError
from irlly.modules.events.schemas import EventKind
from irlly.modules.rsvps.schemas import RSVPCreate, RSVPStatus
from irlly.modules.rsvps.service import RSVPAggregator, RSVPService


def _answer(event_id: str, response: RSVPStatus, kind: EventKind = EventKind.MEETUP) -> RSVPCreate:
    return RSVPCreate(event_id=event_id, event_kind=kind, response=response)


@pytest.fixture
def meetup(db, close_friends) -> str:
    return db.add_meetup(close_friends.alice, [close_friends.circle])


# ---------------------------------------------------------------------------
# Test: upsert
# ---------------------------------------------------------------------------


class TestUpsertRSVP:
    def test_same_answer_twice_stores_one_row(self, db, close_friends, meetup) -> None:
        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))

        assert len(db.rows("rsvps")) == 1
        assert db.rows("rsvps")[0]["response"] == "attending"

    def test_changing_answer_updates_same_row(self, db, close_friends, meetup) -> None:
        """attending then not_attending keeps the row id and creation time."""
        service = RSVPService(db)
        first = service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))
        second = service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.NOT_ATTENDING))

        assert len(db.rows("rsvps")) == 1
        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.response == RSVPStatus.NOT_ATTENDING

    def test_pin_and_meetup_with_same_id_are_separate(self, db, close_friends, meetup) -> None:
        """The unique key includes event_kind."""
        db.add_pin(close_friends.alice, [close_friends.circle])
        db.tables["pins"][0]["id"] = meetup
        db.share("pin", meetup, [close_friends.circle])

        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING, EventKind.MEETUP))
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.NOT_ATTENDING, EventKind.PIN))

        assert sorted(r["event_kind"] for r in db.rows("rsvps")) == ["meetup", "pin"]

    def test_invisible_event_is_not_found(self, db, close_friends, meetup) -> None:
        with pytest.raises(NotFoundError):
            RSVPService(db).upsert_rsvp(close_friends.carol, _answer(meetup, RSVPStatus.ATTENDING))
        assert db.rows("rsvps") == []

    def test_missing_event_is_not_found(self, db, close_friends) -> None:
        with pytest.raises(NotFoundError):
            RSVPService(db).upsert_rsvp(
                close_friends.bob,
                _answer("0b7a3f0e-0000-4000-8000-000000000000", RSVPStatus.ATTENDING)
            )


# ---------------------------------------------------------------------------
# Test: aggregation
# ---------------------------------------------------------------------------


class TestRSVPAggregator:
    def test_no_answers(self, db, close_friends, meetup) -> None:
        summary = RSVPAggregator(db).aggregate(meetup, EventKind.MEETUP, close_friends.bob)
        assert summary.attendees == []
        assert summary.attendee_count == 0
        assert summary.viewer_response is None

    def test_change_of_heart_drops_count(self, db, close_friends, meetup) -> None:
        """Alice attends then withdraws: count drops by one and her response reads not_attending."""
        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))
        service.upsert_rsvp(close_friends.alice, _answer(meetup, RSVPStatus.ATTENDING))
        before = service.get_summary(close_friends.alice, EventKind.MEETUP, meetup)

        service.upsert_rsvp(close_friends.alice, _answer(meetup, RSVPStatus.NOT_ATTENDING))
        after = service.get_summary(close_friends.alice, EventKind.MEETUP, meetup)

        assert before.viewer_response == RSVPStatus.ATTENDING
        assert after.viewer_response == RSVPStatus.NOT_ATTENDING
        assert after.attendee_count == before.attendee_count - 1
        assert [a.username for a in after.attendees] == ["bob"]

    def test_not_attending_is_not_absent(self, db, close_friends, meetup) -> None:
        """An explicit no is reported; a viewer who never answered gets None."""
        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.NOT_ATTENDING))

        assert service.get_summary(close_friends.bob, EventKind.MEETUP, meetup).viewer_response == RSVPStatus.NOT_ATTENDING
        assert service.get_summary(close_friends.alice, EventKind.MEETUP, meetup).viewer_response is None

    def test_attendees_carry_profiles(self, db, close_friends, meetup) -> None:
        RSVPService(db).upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))
        summary = RSVPAggregator(db).aggregate(meetup, EventKind.MEETUP, close_friends.alice)

        assert summary.attendee_count == 1
        assert summary.attendees[0].id == close_friends.bob
        assert summary.attendees[0].name == "Bob"

    def test_aggregate_many_uses_one_rsvp_query(self, db, close_friends, meetup) -> None:
        other = db.add_meetup(close_friends.alice, [close_friends.circle])
        RSVPService(db).upsert_rsvp(close_friends.bob, _answer(other, RSVPStatus.ATTENDING))
        db.log.clear()

        summaries = RSVPAggregator(db).aggregate_many(EventKind.MEETUP, [meetup, other], close_friends.bob)

        assert [t for t, _ in db.log].count("rsvps") == 1
        assert summaries[meetup].attendee_count == 0
        assert summaries[other].attendee_count == 1
        assert summaries[other].viewer_response == RSVPStatus.ATTENDING

    def test_aggregate_many_empty(self, db) -> None:
        assert RSVPAggregator(db).aggregate_many(EventKind.PIN, [], "anyone") == {}
        assert db.log == []


# ---------------------------------------------------------------------------
# Test: reading and withdrawing
# ---------------------------------------------------------------------------


class TestReadAndDelete:
    def test_get_user_rsvp(self, db, close_friends, meetup) -> None:
        service = RSVPService(db)
        assert service.get_user_rsvp(close_friends.bob, EventKind.MEETUP, meetup) is None
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))
        assert service.get_user_rsvp(close_friends.bob, EventKind.MEETUP, meetup).response == RSVPStatus.ATTENDING

    def test_delete_returns_to_no_answer(self, db, close_friends, meetup) -> None:
        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))

        assert service.delete_rsvp(close_friends.bob, EventKind.MEETUP, meetup) is True
        assert service.delete_rsvp(close_friends.bob, EventKind.MEETUP, meetup) is False
        assert service.get_summary(close_friends.bob, EventKind.MEETUP, meetup).viewer_response is None

    def test_list_is_access_checked(self, db, close_friends, meetup) -> None:
        service = RSVPService(db)
        service.upsert_rsvp(close_friends.bob, _answer(meetup, RSVPStatus.ATTENDING))

        rsvps = service.list_rsvps(close_friends.alice, EventKind.MEETUP, meetup)
        assert [r.user.username for r in rsvps] == ["bob"]
        with pytest.raises(NotFoundError):
            service.list_rsvps(close_friends.carol, EventKind.MEETUP, meetup)


# ---------------------------------------------------------------------------
# Test: routes
# ---------------------------------------------------------------------------


class TestRSVPRoutes:
    def test_upsert_and_summary(self, api, close_friends, meetup) -> None:
        api.act_as(close_friends.bob)
        body = {"event_id": meetup, "event_kind": "meetup", "response": "attending"}

        assert api.post("/api/v1/rsvps", json=body).status_code == 200
        assert api.post("/api/v1/rsvps", json=body).status_code == 200

        summary = api.get(f"/api/v1/rsvps/{meetup}/summary", params={"event_kind": "meetup"}).json()
        assert summary["attendee_count"] == 1
        assert summary["viewer_response"] == "attending"

    def test_own_rsvp_is_null_before_answering(self, api, close_friends, meetup) -> None:
        response = api.act_as(close_friends.bob).get(f"/api/v1/rsvps/{meetup}", params={"event_kind": "meetup"})
        assert response.status_code == 200
        assert response.json() is None

    def test_outsider_gets_404(self, api, close_friends, meetup) -> None:
        api.act_as(close_friends.carol)
        body = {"event_id": meetup, "event_kind": "meetup", "response": "attending"}
        assert api.post("/api/v1/rsvps", json=body).status_code == 404
        assert api.get("/api/v1/rsvps", params={"event_id": meetup, "event_kind": "meetup"}).status_code == 404

    def test_unknown_response_is_rejected(self, api, close_friends, meetup) -> None:
        body = {"event_id": meetup, "event_kind": "meetup", "response": "maybe"}
        assert api.act_as(close_friends.bob).post("/api/v1/rsvps", json=body).status_code == 422

    def test_delete(self, api, db, close_friends, meetup) -> None:
        api.act_as(close_friends.bob)
        api.post("/api/v1/rsvps", json={"event_id": meetup, "event_kind": "meetup", "response": "attending"})
        assert api.delete(f"/api/v1/rsvps/{meetup}", params={"event_kind": "meetup"}).status_code == 204
        assert db.rows("rsvps") == []
