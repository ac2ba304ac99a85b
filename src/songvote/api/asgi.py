"""ASGI entrypoint for the song vote API."""

from songvote.api.app import create_app
from songvote.containers import build_container

app = create_app(build_container())
