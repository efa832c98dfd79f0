"""ASGI entrypoint for the macro estimator API."""

from macro_estimator.api.app import create_app
from macro_estimator.containers import build_container

app = create_app(build_container())
