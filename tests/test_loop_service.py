"""Tests for loop lifecycle and the stats read model."""

from __future__ import annotations

from datetime import date

import pytest

from habitloop.errors import DuplicateLoopTitle, InvalidScheduleKind, LoopNotFound, MalformedDay
from habitloop.infra.repositories import SQLModelCheckInRepository, SQLModelSocialRepository
from habitloop.services.checkins import CheckInService
from habitloop.services.loops import LoopService

MONDAY = date(2024, 1, 1)


@pytest.fixture
def service(session_factory):
    return LoopService(session_factory)


def test_create_loop_stores_normalized_frequency(service, user):
    loop = service.create_loop(
        user.id,
        title="  Stretch  ",
        frequency=["Thu", "tue"],
        start_date="2024-01-01",
        visibility="public",
        icon_emoji="🧘",
    )

    assert loop.id is not None
    assert loop.title == "Stretch"
    assert loop.frequency == "tue,thu"
    assert loop.start_date == MONDAY
    assert loop.is_public
    assert loop.to_dict()["frequency"] == ["tue", "thu"]
    assert loop.current_streak == 0


def test_create_loop_defaults_start_to_today(service, user):
    loop = service.create_loop(user.id, title="Read", frequency="daily")
    assert loop.start_date is not None
    assert loop.visibility == "private"


def test_duplicate_title_for_same_owner_rejected(service, user):
    service.create_loop(user.id, title="Read", frequency="daily", start_date=MONDAY)
    with pytest.raises(DuplicateLoopTitle):
        service.create_loop(user.id, title="Read", frequency="weekdays", start_date=MONDAY)


def test_same_title_allowed_for_different_owners(service, user, user_factory):
    other = user_factory()
    service.create_loop(user.id, title="Read", frequency="daily", start_date=MONDAY)
    loop = service.create_loop(other.id, title="Read", frequency="daily", start_date=MONDAY)
    assert loop.owner_id == other.id


def test_invalid_frequency_rejected(service, user):
    with pytest.raises(InvalidScheduleKind):
        service.create_loop(user.id, title="Read", frequency="fortnightly", start_date=MONDAY)


def test_malformed_start_date_rejected(service, user):
    with pytest.raises(MalformedDay):
        service.create_loop(user.id, title="Read", frequency="daily", start_date="soon")


def test_list_loops_is_owner_scoped(service, user, user_factory, loop_factory):
    other = user_factory()
    loop_factory(title="Mine")
    loop_factory(title="Theirs", owner=other)

    titles = [loop.title for loop in service.list_loops(user.id)]

    assert titles == ["Mine"]


def test_get_loop_of_other_owner_is_not_found(service, user_factory, loop_factory):
    loop = loop_factory()
    stranger = user_factory()
    with pytest.raises(LoopNotFound):
        service.get_loop(loop.id, stranger.id)


def test_delete_loop_removes_dependents(
    service, session_factory, loop_factory, checkin_factory, user_factory
):
    loop = loop_factory(visibility="public")
    checkin_factory(loop, MONDAY)
    fan = user_factory()
    social = SQLModelSocialRepository(session_factory)
    social.upsert_reaction(loop_id=loop.id, user_id=fan.id, emoji="🔥")

    service.delete_loop(loop.id, loop.owner_id)

    with pytest.raises(LoopNotFound):
        service.get_loop(loop.id, loop.owner_id)
    assert SQLModelCheckInRepository(session_factory).get(loop.id, MONDAY) is None
    assert social.get_reaction(loop.id, fan.id) is None


def test_delete_unknown_loop_raises(service, user):
    with pytest.raises(LoopNotFound):
        service.delete_loop(12345, user.id)


def test_loop_stats_combines_streaks_and_completion(service, session_factory, loop_factory):
    loop = loop_factory()
    check_ins = CheckInService(session_factory)
    for n in (1, 2, 4):
        check_ins.record_completion(loop.id, loop.owner_id, date(2024, 1, n), now=date(2024, 1, 4))

    stats = service.loop_stats(loop.id, loop.owner_id, now=date(2024, 1, 4))

    assert stats == {
        "currentStreak": 1,
        "longestStreak": 2,
        "totalCheckIns": 3,
        "expectedCheckIns": 4,
        "completionRate": 75,
        "checkInsByDate": {"2024-01-01": 1, "2024-01-02": 1, "2024-01-04": 1},
        "startDate": "2024-01-01",
    }


def test_loop_stats_ignore_missed_records(service, loop_factory, checkin_factory):
    loop = loop_factory()
    checkin_factory(loop, MONDAY, status="missed")

    stats = service.loop_stats(loop.id, loop.owner_id, now=date(2024, 1, 2))

    assert stats["totalCheckIns"] == 0
    assert stats["expectedCheckIns"] == 2
    assert stats["completionRate"] == 0
