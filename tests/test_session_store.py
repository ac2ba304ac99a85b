"""Tests for the in-memory session store."""

import pytest

from songvote.domain.errors import InvalidArgument, NotFound
from songvote.services.sessions import SessionStore
from songvote.services.songs import SongQueueService
from tests.conftest import START, FakeClock, add_test_song


def test_create_initializes_empty_session(store: SessionStore) -> None:
    session = store.create("Party")

    assert session.name == "Party"
    assert session.created_at == START
    assert session.songs == {}
    assert session.removed_songs == []
    assert session.voters == {}
    assert store.get(session.id) is session


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_rejects_blank_names(store: SessionStore, name) -> None:
    with pytest.raises(InvalidArgument):
        store.create(name)

    assert store.list() == []


def test_create_generates_unique_ids(store: SessionStore) -> None:
    ids = {store.create(f"Session {index}").id for index in range(50)}

    assert len(ids) == 50


def test_get_unknown_session_raises(store: SessionStore) -> None:
    with pytest.raises(NotFound):
        store.get("missing")

    with pytest.raises(NotFound), store.locked("missing"):
        pass


def test_list_returns_summaries_in_creation_order(
    store: SessionStore, song_queue_service: SongQueueService, clock: FakeClock
) -> None:
    first = store.create("First")
    clock.advance(5)
    second = store.create("Second")
    add_test_song(song_queue_service, second.id, "s1")
    add_test_song(song_queue_service, second.id, "s2")

    summaries = store.list()

    assert [summary.id for summary in summaries] == [first.id, second.id]
    assert [summary.songs_count for summary in summaries] == [0, 2]
    assert summaries[1].name == "Second"


def test_stores_are_isolated() -> None:
    first = SessionStore(clock=FakeClock())
    second = SessionStore(clock=FakeClock())

    session = first.create("Only here")

    with pytest.raises(NotFound):
        second.get(session.id)
