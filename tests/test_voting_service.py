"""Tests for vote casting and transfer."""

import random
import threading
from datetime import timedelta

import pytest

from songvote.domain.errors import CooldownActive, NotFound
from songvote.services.sessions import SessionStore
from songvote.services.songs import SongQueueService
from songvote.services.voting import VotingService
from tests.conftest import START, FakeClock, add_test_song


def test_party_scenario(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
) -> None:
    session = store.create("Party")
    song = song_queue_service.add_song(
        session.id, song_id="s1", name="Foo", album_image="http://x", added_by="u1"
    )
    assert song.votes == 0

    result = voting_service.cast_vote(session.id, "s1", "u1")
    assert result.song_votes == 1
    assert result.next_eligible_at == START + timedelta(seconds=60)

    with pytest.raises(CooldownActive) as excinfo:
        voting_service.cast_vote(session.id, "s1", "u1")
    assert excinfo.value.remaining == timedelta(seconds=60)
    assert store.get(session.id).songs["s1"].votes == 1


def test_vote_transfer_moves_single_vote(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    add_test_song(song_queue_service, session.id, "b")

    voting_service.cast_vote(session.id, "a", "u1")
    clock.advance(60)
    result = voting_service.cast_vote(session.id, "b", "u1")

    songs = store.get(session.id).songs
    assert songs["a"].votes == 0
    assert songs["b"].votes == 1
    assert result.previous_song_id == "a"
    record = store.get(session.id).voters["u1"]
    assert record.song_id == "b"
    assert record.last_voted_at == clock.now()


def test_cooldown_applies_across_songs(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    add_test_song(song_queue_service, session.id, "b")
    voting_service.cast_vote(session.id, "a", "u1")
    clock.advance(45)

    with pytest.raises(CooldownActive) as excinfo:
        voting_service.cast_vote(session.id, "b", "u1")

    assert excinfo.value.remaining == timedelta(seconds=15)
    songs = store.get(session.id).songs
    assert (songs["a"].votes, songs["b"].votes) == (1, 0)


def test_revote_same_song_after_cooldown_is_noop(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    voting_service.cast_vote(session.id, "a", "u1")
    clock.advance(120)

    result = voting_service.cast_vote(session.id, "a", "u1")

    assert result.song_votes == 1
    assert result.previous_song_id is None
    assert store.get(session.id).voters["u1"].last_voted_at == START


def test_votes_from_many_users_accumulate(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")

    for user in ("u1", "u2", "u3"):
        voting_service.cast_vote(session.id, "a", user)

    assert store.get(session.id).songs["a"].votes == 3
    assert set(store.get(session.id).voters) == {"u1", "u2", "u3"}


def test_vote_for_unknown_song_or_session(
    store: SessionStore, voting_service: VotingService
) -> None:
    session = store.create("Party")

    with pytest.raises(NotFound):
        voting_service.cast_vote(session.id, "missing", "u1")
    with pytest.raises(NotFound):
        voting_service.cast_vote("missing", "a", "u1")

    assert store.get(session.id).voters == {}


def test_missing_song_checked_before_cooldown(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    voting_service.cast_vote(session.id, "a", "u1")

    with pytest.raises(NotFound):
        voting_service.cast_vote(session.id, "missing", "u1")


def test_transfer_from_removed_song_only_credits_target(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    add_test_song(song_queue_service, session.id, "b")
    voting_service.cast_vote(session.id, "a", "u1")
    song_queue_service.remove_song(session.id, "a")
    clock.advance(60)

    result = voting_service.cast_vote(session.id, "b", "u1")

    assert result.song_votes == 1
    assert "a" not in store.get(session.id).songs


def test_transfer_floors_previous_song_at_zero(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    add_test_song(song_queue_service, session.id, "b")
    voting_service.cast_vote(session.id, "a", "u1")
    store.get(session.id).songs["a"].votes = 0
    clock.advance(60)

    voting_service.cast_vote(session.id, "b", "u1")

    assert store.get(session.id).songs["a"].votes == 0


def test_votes_never_negative_under_random_voting(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
    clock: FakeClock,
) -> None:
    session = store.create("Party")
    for song_id in ("a", "b", "c"):
        add_test_song(song_queue_service, session.id, song_id)
    rng = random.Random(11)

    for _ in range(500):
        clock.advance(rng.choice([5, 30, 61]))
        try:
            voting_service.cast_vote(
                session.id, rng.choice("abc"), f"u{rng.randint(0, 4)}"
            )
        except CooldownActive:
            pass
        current = store.get(session.id)
        assert all(song.votes >= 0 for song in current.songs.values())
        assert sum(song.votes for song in current.songs.values()) == len(
            current.voters
        )


def test_concurrent_votes_do_not_lose_updates(
    store: SessionStore,
    song_queue_service: SongQueueService,
    voting_service: VotingService,
) -> None:
    session = store.create("Party")
    add_test_song(song_queue_service, session.id, "a")
    users = [f"user-{index}" for index in range(200)]
    barrier = threading.Barrier(8)

    def vote_all(chunk: list[str]) -> None:
        barrier.wait()
        for user in chunk:
            voting_service.cast_vote(session.id, "a", user)

    threads = [
        threading.Thread(target=vote_all, args=(users[index::8],)) for index in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get(session.id).songs["a"].votes == 200
