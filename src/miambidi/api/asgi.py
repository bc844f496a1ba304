"""ASGI entrypoint for the MiamBidi API."""

from miambidi.api.app import create_app
from miambidi.containers import build_container

app = create_app(build_container())
