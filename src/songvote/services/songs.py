"""Song queue operations for a session."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from songvote.domain.errors import Conflict, CooldownActive, NotFound, require_fields
from songvote.domain.sessions import RemovedSongMarker, Session, Song
from songvote.services.clock import Clock, SystemClock
from songvote.services.cooldowns import DEFAULT_SONG_REMOVAL_COOLDOWN, remaining
from songvote.services.sessions import SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class SongQueueService:
    """Adds and removes songs while enforcing uniqueness and re-add cooldown."""

    store: SessionStore
    clock: Clock = field(default_factory=SystemClock)
    removal_cooldown: timedelta = DEFAULT_SONG_REMOVAL_COOLDOWN

    def add_song(  # noqa: PLR0913
        self,
        session_id: str,
        song_id: str | None,
        name: str | None,
        album_image: str | None,
        added_by: str | None,
        artist: str | None = None,
        song_link: str | None = None,
    ) -> Song:
        """Queue a song with zero votes and return it."""
        require_fields(
            {
                "songId": song_id,
                "name": name,
                "albumImage": album_image,
                "addedBy": added_by,
            }
        )

        with self.store.locked(session_id) as session:
            if song_id in session.songs:
                raise Conflict("Song already exists in the session")
            now = self.clock.now()
            wait = self._removal_wait(session, song_id, now)
            if wait is not None:
                _logger.info(
                    "Re-add blocked: session=%s song=%s remaining=%s",
                    session_id,
                    song_id,
                    wait,
                )
                raise CooldownActive("add_song", wait)
            song = Song(
                id=song_id,
                name=name,
                artist=artist,
                album_image=album_image,
                song_link=song_link,
                added_by=added_by,
                added_at=now,
            )
            session.songs[song_id] = song
        _logger.info(
            "Song added: session=%s song=%s by=%s", session_id, song_id, added_by
        )
        return song

    def remove_song(self, session_id: str, song_id: str) -> None:
        """Remove a queued song and start its re-add cooldown."""
        with self.store.locked(session_id) as session:
            if song_id not in session.songs:
                raise NotFound("Song not found in session")
            del session.songs[song_id]
            now = self.clock.now()
            session.removed_songs.append(RemovedSongMarker(id=song_id, removed_at=now))
            session.removed_songs = [
                marker
                for marker in session.removed_songs
                if remaining(marker.removed_at, self.removal_cooldown, now) is not None
            ]
        _logger.info("Song removed: session=%s song=%s", session_id, song_id)

    def _removal_wait(
        self, session: Session, song_id: str, now: datetime
    ) -> timedelta | None:
        """Return the longest active re-add wait for a song, if any."""
        waits = [
            wait
            for marker in session.removed_songs
            if marker.id == song_id
            and (wait := remaining(marker.removed_at, self.removal_cooldown, now))
            is not None
        ]
        return max(waits) if waits else None
