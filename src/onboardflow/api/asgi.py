"""ASGI entrypoint for the OnboardFlow API."""

from onboardflow.api.app import create_app
from onboardflow.containers import build_container

app = create_app(build_container())
