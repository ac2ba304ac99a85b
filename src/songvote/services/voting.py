"""Single standing vote per user, with transfer and cooldown."""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from songvote.domain.errors import CooldownActive, NotFound
from songvote.domain.sessions import VoteRecord, VoteResult
from songvote.services.clock import Clock, SystemClock
from songvote.services.cooldowns import DEFAULT_VOTE_COOLDOWN, remaining
from songvote.services.sessions import SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class VotingService:
    """Casts and transfers votes.

    A user owns at most one vote per session. Voting for a different song
    moves that vote, and every vote action starts a per-user cooldown that
    applies across all songs.
    """

    store: SessionStore
    clock: Clock = field(default_factory=SystemClock)
    cooldown: timedelta = DEFAULT_VOTE_COOLDOWN

    def cast_vote(self, session_id: str, song_id: str, user_id: str) -> VoteResult:
        """Credit the user's vote to a song and return the new count."""
        with self.store.locked(session_id) as session:
            song = session.songs.get(song_id)
            if song is None:
                raise NotFound("Song not found in session")

            now = self.clock.now()
            previous = session.voters.get(user_id)
            if previous is not None:
                wait = remaining(previous.last_voted_at, self.cooldown, now)
                if wait is not None:
                    _logger.debug(
                        "Vote blocked: session=%s user=%s remaining=%s",
                        session_id,
                        user_id,
                        wait,
                    )
                    raise CooldownActive("cast_vote", wait)

            transferred_from = None
            if previous is not None and previous.song_id != song_id:
                previous_song = session.songs.get(previous.song_id)
                if previous_song is not None:
                    previous_song.votes = max(0, previous_song.votes - 1)
                transferred_from = previous.song_id

            if previous is None or previous.song_id != song_id:
                song.votes += 1
                session.voters[user_id] = VoteRecord(song_id=song_id, last_voted_at=now)
                _logger.info(
                    "Vote cast: session=%s user=%s song=%s from=%s votes=%s",
                    session_id,
                    user_id,
                    song_id,
                    transferred_from,
                    song.votes,
                )

            return VoteResult(
                song_id=song_id,
                song_votes=song.votes,
                next_eligible_at=now + self.cooldown,
                previous_song_id=transferred_from,
            )
