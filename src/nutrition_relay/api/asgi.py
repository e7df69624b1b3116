"""ASGI entrypoint, e.g. ``uvicorn nutrition_relay.api.asgi:app``.

Settings are read once at import; SDK clients are still built on first use.
"""

from nutrition_relay.api.app import create_app
from nutrition_relay.config import Settings
from nutrition_relay.containers import build_container

settings = Settings()
container = build_container(settings)
app = create_app(container)
