import asyncio
import threading
from datetime import datetime, timedelta, timezone

import pytest

from church_portal_api.app.core.errors import NotFoundError
from church_portal_api.app.core.security import Principal
from church_portal_api.app.core.storage import MemStorage
from church_portal_api.app.schemas.event import EventCreate, EventUpdate
from church_portal_api.app.schemas.forum import ForumReplyCreate, ForumTopicCreate
from church_portal_api.app.schemas.post import PostCreate, PostUpdate
from church_portal_api.app.schemas.site_setting import SiteSettingCreate, SiteSettingUpdate
from church_portal_api.app.schemas.study import StudyCreate, StudyUpdate
from church_portal_api.app.schemas.user import UserCreate, UserUpdate
from church_portal_api.app.services.event_service import EventService
from church_portal_api.app.services.settings_service import SettingsService


def make_event(storage, start, title="Event", created_by=1):
    return storage.create_event(
        EventCreate(
            title=title,
            event_type="service",
            start_time=start,
            end_time=start + timedelta(hours=1),
            location="Hall",
            created_by=created_by,
        )
    )


def make_user(storage, username="alice", role="member"):
    return storage.create_user(
        UserCreate(username=username, password="x$y", name="Alice", email="a@example.com", role=role)
    )


@pytest.fixture
def storage():
    return MemStorage()


def test_ids_are_distinct_and_increasing(storage):
    now = datetime.now(timezone.utc)
    ids = [make_event(storage, now + timedelta(days=i)).id for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5
    assert ids[0] == 1


def test_ids_are_not_reused_after_delete(storage):
    first = storage.create_post(PostCreate(title="a", content="b", author_id=1))
    assert storage.delete_post(first.id) is True
    second = storage.create_post(PostCreate(title="c", content="d", author_id=1))
    assert second.id > first.id


def test_each_kind_has_its_own_sequence(storage):
    post = storage.create_post(PostCreate(title="a", content="b", author_id=1))
    study = storage.create_study(StudyCreate(title="a", content="b", category="c", author_id=1))
    assert post.id == 1
    assert study.id == 1


def test_create_stamps_timestamp(storage):
    before = datetime.now(timezone.utc)
    study = storage.create_study(StudyCreate(title="a", content="b", category="c", author_id=1))
    assert study.created_at >= before


def test_update_preserves_unspecified_fields(storage):
    study = storage.create_study(
        StudyCreate(title="Romans", content="text", category="epistles", author_id=3, file_url="f.pdf")
    )
    updated = storage.update_study(study.id, StudyUpdate(title="Romans 8"))
    assert updated.title == "Romans 8"
    assert updated.model_dump(exclude={"title"}) == study.model_dump(exclude={"title"})


def test_update_ignores_null_for_required_fields_but_clears_optional_ones(storage):
    study = storage.create_study(
        StudyCreate(title="Romans", content="text", category="epistles", author_id=3, file_url="f.pdf")
    )
    updated = storage.update_study(study.id, StudyUpdate(title=None, file_url=None))
    assert updated.title == "Romans"
    assert updated.file_url is None


def test_update_never_touches_defaulted_flags_with_null(storage):
    post = storage.create_post(PostCreate(title="a", content="b", author_id=1))
    updated = storage.update_post(post.id, PostUpdate(is_published=None))
    assert updated.is_published is True
    unpublished = storage.update_post(post.id, PostUpdate(is_published=False))
    assert unpublished.is_published is False


def test_update_missing_returns_none(storage):
    assert storage.update_event(42, EventUpdate(title="x")) is None
    assert storage.get_event(42) is None


def test_delete_is_idempotent(storage):
    event = make_event(storage, datetime.now(timezone.utc))
    assert storage.delete_event(event.id) is True
    assert storage.delete_event(event.id) is False


def test_returned_records_are_copies(storage):
    event = make_event(storage, datetime.now(timezone.utc), title="Original")
    event.title = "Changed"
    assert storage.get_event(event.id).title == "Original"


def test_upcoming_events_are_future_and_sorted(storage):
    now = datetime.now(timezone.utc)
    plus1 = make_event(storage, now + timedelta(hours=1), "plus1")
    plus3 = make_event(storage, now + timedelta(hours=3), "plus3")
    make_event(storage, now - timedelta(hours=1), "minus1")
    plus2 = make_event(storage, now + timedelta(hours=2), "plus2")

    upcoming = storage.get_upcoming_events(3)
    assert [e.id for e in upcoming] == [plus1.id, plus2.id, plus3.id]


def test_upcoming_events_default_count_and_ties(storage):
    start = datetime.now(timezone.utc) + timedelta(days=1)
    created = [make_event(storage, start, f"e{i}") for i in range(7)]
    upcoming = storage.get_upcoming_events()
    assert len(upcoming) == 5
    # Equal start times keep insertion order.
    assert [e.id for e in upcoming] == [e.id for e in created[:5]]


def test_upcoming_events_with_zero_count(storage):
    make_event(storage, datetime.now(timezone.utc) + timedelta(days=1))
    assert storage.get_upcoming_events(0) == []


def test_replies_by_topic(storage):
    topic = storage.create_forum_topic(ForumTopicCreate(title="t", content="c", category="general", author_id=1))
    other = storage.create_forum_topic(ForumTopicCreate(title="u", content="c", category="general", author_id=1))
    first = storage.create_forum_reply(ForumReplyCreate(content="one", topic_id=topic.id, author_id=1))
    storage.create_forum_reply(ForumReplyCreate(content="elsewhere", topic_id=other.id, author_id=1))
    second = storage.create_forum_reply(ForumReplyCreate(content="two", topic_id=topic.id, author_id=2))

    replies = storage.get_forum_replies_by_topic(topic.id)
    assert [r.id for r in replies] == [first.id, second.id]
    assert storage.get_forum_replies_by_topic(999) == []


def test_deleting_topic_keeps_replies(storage):
    topic = storage.create_forum_topic(ForumTopicCreate(title="t", content="c", category="general", author_id=1))
    storage.create_forum_reply(ForumReplyCreate(content="one", topic_id=topic.id, author_id=1))
    storage.delete_forum_topic(topic.id)
    assert len(storage.get_forum_replies_by_topic(topic.id)) == 1


def test_user_lookup_by_username_is_case_sensitive(storage):
    user = make_user(storage, "Admin")
    assert storage.get_user_by_username("Admin").id == user.id
    assert storage.get_user_by_username("admin") is None


def test_update_user_keeps_identity_and_created_at(storage):
    user = make_user(storage)
    updated = storage.update_user(user.id, UserUpdate(role="admin"))
    assert updated.role == "admin"
    assert updated.id == user.id
    assert updated.created_at == user.created_at
    assert updated.password == user.password


def test_site_setting_lookup_and_update_refreshes_timestamp(storage):
    setting = storage.create_site_setting(SiteSettingCreate(key="siteName", value="A", updated_by=1))
    assert storage.get_site_setting("siteName").id == setting.id
    assert storage.get_site_setting("sitename") is None

    updated = storage.update_site_setting(setting.id, SiteSettingUpdate(value="B", updated_by=2))
    assert updated.value == "B"
    assert updated.updated_by == 2
    assert updated.updated_at >= setting.updated_at
    assert len(storage.get_all_site_settings()) == 1


def run_threads(target, count):
    threads = [threading.Thread(target=target, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    assert not any(thread.is_alive() for thread in threads)


def test_concurrent_upserts_of_a_new_key_create_one_setting(storage):
    admin = Principal(id=1, role="admin")
    barrier = threading.Barrier(20)
    created_flags = []

    def upsert(i):
        barrier.wait()
        _, created = asyncio.run(SettingsService.upsert(storage, "theme", f"v{i}", admin))
        created_flags.append(created)

    run_threads(upsert, 20)

    assert len(created_flags) == 20
    assert created_flags.count(True) == 1
    settings = storage.get_all_site_settings()
    assert len(settings) == 1
    assert settings[0].key == "theme"


def test_gated_update_waits_for_the_storage_lock(storage):
    event = make_event(storage, datetime.now(timezone.utc) + timedelta(days=1), created_by=7)
    owner = Principal(id=7, role="member")
    outcome = {}

    def update():
        try:
            outcome["event"] = asyncio.run(EventService.update(storage, event.id, EventUpdate(title="Renamed"), owner))
        except NotFoundError as e:
            outcome["error"] = e

    with storage.lock:
        thread = threading.Thread(target=update)
        thread.start()
        thread.join(timeout=0.2)
        assert thread.is_alive()
        assert storage.get_event(event.id).title == "Event"
        storage.delete_event(event.id)
    thread.join(timeout=10)

    assert "event" not in outcome
    assert str(outcome["error"]) == "Event not found"
    assert storage.get_event(event.id) is None


def test_racing_delete_and_update_never_half_apply(storage):
    owner = Principal(id=7, role="member")
    start = datetime.now(timezone.utc) + timedelta(days=1)

    for _ in range(25):
        event = make_event(storage, start, created_by=7)
        barrier = threading.Barrier(2)
        outcome = {}

        def act(i):
            barrier.wait()
            if i == 0:
                asyncio.run(EventService.delete(storage, event.id, owner))
                return
            try:
                outcome["event"] = asyncio.run(
                    EventService.update(storage, event.id, EventUpdate(title="Renamed"), owner)
                )
            except NotFoundError:
                outcome["missing"] = True

        run_threads(act, 2)

        assert len(outcome) == 1
        if "event" in outcome:
            updated = outcome["event"]
            assert updated.id == event.id
            assert updated.title == "Renamed"
            assert updated.created_by == 7
            assert updated.location == "Hall"
        assert storage.get_event(event.id) is None
