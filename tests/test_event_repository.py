from datetime import date

import pytest

from daybook.data import DatabaseGateway
from daybook.data.repositories import EventRepository
from daybook.domain import (
    DatabaseNotOpenError,
    EventFilter,
    EventPatch,
    NotFoundError,
    StorageError,
)


def _titles(events):
    return [event.title for event in events]


def test_create_then_find_returns_equal_record(events, user, make_event):
    draft = make_event(
        user,
        description="Weekly planning",
        location="Room 4",
        category="work",
        color="#ef4444",
        is_recurring=True,
        recurrence_pattern="weekly",
        recurrence_end_date="2024-06-30",
        reminder_minutes=10,
        timezone="America/New_York",
    )

    stored = events.create(draft)
    found = events.find_by_id(stored.id)

    assert found == stored == draft
    assert found.is_recurring is True


def test_find_by_id_missing_returns_none(events):
    assert events.find_by_id("does-not-exist") is None


def test_date_range_is_inclusive_on_both_ends(events, user, make_event):
    for day in ("2024-02-29", "2024-03-01", "2024-03-15", "2024-03-31", "2024-04-01"):
        events.create(make_event(user, title=day, date=day))

    march = events.list_by_user(user, EventFilter.build(start_date="2024-03-01", end_date="2024-03-31"))
    assert _titles(march) == ["2024-03-01", "2024-03-15", "2024-03-31"]

    narrowed = events.list_by_user(user, EventFilter.build(start_date="2024-03-02", end_date="2024-03-30"))
    assert _titles(narrowed) == ["2024-03-15"]

    open_ended = events.list_by_user(user, EventFilter(start_date=date(2024, 3, 31)))
    assert _titles(open_ended) == ["2024-03-31", "2024-04-01"]


@pytest.mark.parametrize("term", ["team", "SYNC", "m Sy"])
def test_search_is_case_insensitive_substring_of_title(events, user, make_event, term):
    events.create(make_event(user, title="Team Sync"))
    events.create(make_event(user, title="Dentist"))

    assert _titles(events.list_by_user(user, EventFilter(search=term))) == ["Team Sync"]


def test_search_matches_description_too(events, user, make_event):
    events.create(make_event(user, title="Lunch", description="with the Platform team"))
    events.create(make_event(user, title="Gym", description=""))

    assert _titles(events.list_by_user(user, EventFilter(search="PLATFORM"))) == ["Lunch"]


def test_search_treats_wildcards_literally(events, user, make_event):
    events.create(make_event(user, title="Hit 100% of goals"))
    events.create(make_event(user, title="Hit 1000 goals"))

    assert _titles(events.list_by_user(user, EventFilter(search="100%"))) == ["Hit 100% of goals"]
    assert _titles(events.list_by_user(user, EventFilter(search="1_0"))) == []


def test_filters_combine_with_and(events, user, make_event):
    events.create(make_event(user, title="Sync A", category="work", date="2024-03-05"))
    events.create(make_event(user, title="Sync B", category="personal", date="2024-03-05"))
    events.create(make_event(user, title="Sync C", category="work", date="2024-04-05"))
    events.create(make_event(user, title="Review", category="work", date="2024-03-06"))

    event_filter = EventFilter.build(start_date="2024-03-01", end_date="2024-03-31", category="work", search="sync")
    assert _titles(events.list_by_user(user, event_filter)) == ["Sync A"]


def test_listing_orders_by_date_then_start_time(events, user, make_event):
    events.create(make_event(user, title="late", date="2024-03-06", start_time="08:00", end_time="09:00"))
    events.create(make_event(user, title="afternoon", date="2024-03-05", start_time="14:00", end_time="15:00"))
    events.create(make_event(user, title="morning", date="2024-03-05", start_time="9:00", end_time="10:00"))

    assert _titles(events.list_by_user(user)) == ["morning", "afternoon", "late"]


def test_listing_is_scoped_to_user(events, user, other_user, make_event):
    events.create(make_event(user, title="mine"))
    events.create(make_event(other_user, title="theirs"))

    assert _titles(events.list_by_user(user)) == ["mine"]
    assert _titles(events.list_by_user(other_user)) == ["theirs"]
    assert events.list_by_user("nobody") == []


def test_empty_update_is_a_no_op(events, user, make_event):
    stored = events.create(make_event(user))

    unchanged = events.update(stored.id, EventPatch())

    assert unchanged == stored
    assert events.find_by_id(stored.id).updated_at == stored.updated_at


def test_single_field_update_changes_only_that_field(events, user, make_event):
    stored = events.create(make_event(user, description="keep me", location="Room 1"))

    updated = events.update(stored.id, EventPatch.from_mapping({"location": ""}))

    assert updated.location == ""
    assert updated.description == "keep me"
    assert updated.title == stored.title
    assert updated.created_at == stored.created_at
    assert updated.updated_at > stored.updated_at
    assert events.find_by_id(stored.id) == updated


def test_update_missing_event_raises(events):
    with pytest.raises(NotFoundError):
        events.update("missing", EventPatch.from_mapping({"title": "x"}))
    with pytest.raises(NotFoundError):
        events.update("missing", EventPatch())


def test_belongs_to_user(events, user, other_user, make_event):
    stored = events.create(make_event(user))

    assert events.belongs_to_user(stored.id, user) is True
    assert events.belongs_to_user(stored.id, other_user) is False
    assert events.belongs_to_user("missing", user) is False


def test_delete_is_hard_and_idempotent(events, user, make_event):
    stored = events.create(make_event(user))

    assert events.delete(stored.id) is True
    assert events.find_by_id(stored.id) is None
    assert events.delete(stored.id) is False


def test_deleting_user_cascades_to_events(context, events, user, other_user, make_event):
    mine = events.create(make_event(user))
    theirs = events.create(make_event(other_user))

    assert context.users.delete(user) is True

    assert events.find_by_id(mine.id) is None
    assert events.find_by_id(theirs.id) is not None


def test_unknown_owner_is_a_storage_error(events, make_event):
    with pytest.raises(StorageError):
        events.create(make_event("ghost"))


def test_closed_store_refuses_work(settings, make_event):
    repository = EventRepository(gateway=DatabaseGateway(settings.storage))

    with pytest.raises(DatabaseNotOpenError):
        repository.list_by_user("user-a")
    with pytest.raises(StorageError):
        repository.find_by_id("anything")


def test_user_accounts(context, user):
    account = context.users.fetch(user)

    assert account.username == "alice"
    assert account.email == "alice@example.com"
    assert account.created_at is not None
    assert context.users.fetch("nobody") is None
    assert context.users.exists(user) is True
    assert context.users.delete("nobody") is False
