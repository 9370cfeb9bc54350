"""ASGI entrypoint for the artwork agent API."""

from artwork_agent.api.app import create_app
from artwork_agent.containers import build_container

app = create_app(build_container())
