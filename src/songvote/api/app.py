"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from songvote.api.models import (
    AddSongRequest,
    CreateSessionRequest,
    SessionResponse,
    SessionSummaryResponse,
    SessionViewResponse,
    SongResponse,
    TrackResponse,
    TrackSearchResponse,
    VoteRequest,
    VoteResponse,
)
from songvote.app_logging import configure_logging, level_for_environment
from songvote.config import parse_allowed_origins
from songvote.containers import AppContainer
from songvote.domain.errors import (
    Conflict,
    CooldownActive,
    InvalidArgument,
    NotFound,
    ValidationError,
    require_fields,
)
from songvote.services.cooldowns import ceil_minutes, ceil_seconds
from songvote.services.projection import view_session


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(level_for_environment(container.settings.environment))
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    allowed_origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _register_error_handlers(app, logger)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/sessions", response_model=SessionResponse)
    async def create_session(
        body: CreateSessionRequest, request: Request
    ) -> SessionResponse:
        """Create a new session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.create(body.name)
        return SessionResponse.from_domain(session)

    @app.get("/api/sessions", response_model=list[SessionSummaryResponse])
    async def list_sessions(request: Request) -> list[SessionSummaryResponse]:
        """List every session with its song count."""
        state_container: AppContainer = request.app.state.container
        return [
            SessionSummaryResponse.from_domain(summary)
            for summary in state_container.session_store.list()
        ]

    @app.get("/api/sessions/{session_id}", response_model=SessionViewResponse)
    async def get_session(session_id: str, request: Request) -> SessionViewResponse:
        """Return the ranked view of a session."""
        state_container: AppContainer = request.app.state.container
        view = view_session(
            state_container.session_store,
            session_id,
            vote_cooldown=state_container.vote_cooldown,
            removal_cooldown=state_container.removal_cooldown,
        )
        return SessionViewResponse.from_domain(view)

    @app.post(
        "/api/sessions/{session_id}/songs",
        response_model=SongResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def add_song(
        session_id: str, body: AddSongRequest, request: Request
    ) -> SongResponse:
        """Queue a song in a session."""
        state_container: AppContainer = request.app.state.container
        # Unknown sessions report 404 before payload problems.
        state_container.session_store.get(session_id)
        song = state_container.song_queue_service.add_song(
            session_id,
            song_id=body.song_id,
            name=body.name,
            album_image=body.album_image,
            added_by=body.user_id,
            artist=body.artist,
            song_link=body.song_link,
        )
        return SongResponse.from_domain(song)

    @app.delete("/api/sessions/{session_id}/songs")
    async def remove_song(
        session_id: str,
        request: Request,
        song_id: str | None = Query(default=None, alias="songId"),
    ) -> dict[str, str]:
        """Remove a song from a session."""
        require_fields({"songId": song_id})
        state_container: AppContainer = request.app.state.container
        state_container.song_queue_service.remove_song(session_id, song_id)
        return {"message": "Song removed successfully"}

    @app.post("/api/sessions/{session_id}/vote", response_model=VoteResponse)
    async def cast_vote(
        session_id: str, body: VoteRequest, request: Request
    ) -> VoteResponse:
        """Cast or transfer a user's vote."""
        state_container: AppContainer = request.app.state.container
        state_container.session_store.get(session_id)
        require_fields({"songId": body.song_id, "userId": body.user_id})
        result = state_container.voting_service.cast_vote(
            session_id, body.song_id, body.user_id
        )
        return VoteResponse.from_domain(result)

    @app.get("/api/spotify", response_model=TrackSearchResponse)
    async def search_tracks(
        request: Request, q: str | None = None
    ) -> TrackSearchResponse | JSONResponse:
        """Search tracks to add to a session."""
        state_container: AppContainer = request.app.state.container
        try:
            tracks = await state_container.track_search_service.search(q)
        except (httpx.HTTPError, RuntimeError) as exc:
            logger.exception("Track search failed", extra={"query": q})
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={"error": f"Error searching tracks: {exc}"},
            )
        return TrackSearchResponse(
            tracks=[TrackResponse.from_domain(track) for track in tracks]
        )

    return app


def _register_error_handlers(app: FastAPI, logger: logging.Logger) -> None:
    """Map domain errors to HTTP responses."""

    def _error(status_code: int, message: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message})

    @app.exception_handler(InvalidArgument)
    async def invalid_argument(request: Request, exc: InvalidArgument) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = [
            ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            + f": {error.get('msg', 'invalid value')}"
            for error in exc.errors()
        ]
        return _error(
            status.HTTP_400_BAD_REQUEST, "Invalid request: " + "; ".join(problems)
        )

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(Conflict)
    async def conflict(request: Request, exc: Conflict) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(CooldownActive)
    async def cooldown_active(request: Request, exc: CooldownActive) -> JSONResponse:
        if exc.action == "add_song":
            message = (
                "This song was recently removed. Please wait "
                f"{ceil_minutes(exc.remaining)} minutes before adding it again."
            )
        else:
            message = f"You can vote again in {ceil_seconds(exc.remaining)} seconds"
        logger.info("Cooldown rejected %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "error": message,
                "retryAfterSeconds": exc.remaining.total_seconds(),
            },
            headers={"Retry-After": str(ceil_seconds(exc.remaining))},
        )
