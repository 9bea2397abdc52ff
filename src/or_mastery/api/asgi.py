"""ASGI entrypoint for the OR Mastery API."""

from or_mastery.api.app import create_app
from or_mastery.containers import build_container

app = create_app(build_container())
