"""ASGI entrypoint for the Byte Buddy API."""

from byte_buddy.api.app import create_app
from byte_buddy.containers import build_container

app = create_app(build_container())
