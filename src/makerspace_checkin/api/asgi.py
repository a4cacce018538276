"""ASGI entrypoint for the check-in API."""

from makerspace_checkin.api.app import create_app
from makerspace_checkin.containers import build_container

app = create_app(build_container())
