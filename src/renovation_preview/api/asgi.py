"""ASGI entrypoint for the renovation preview API."""

from renovation_preview.api.app import create_app
from renovation_preview.containers import build_container

app = create_app(build_container())
