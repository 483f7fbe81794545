"""ASGI entrypoint for the FitPal API."""

from fitpal.api.app import create_app
from fitpal.containers import build_container

app = create_app(build_container())
