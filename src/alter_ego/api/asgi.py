"""ASGI entrypoint for the AlterEgo API.

Settings, the transform backend and the Supabase state store are resolved
from the environment when the module is imported.
"""

from alter_ego.api.app import create_app
from alter_ego.containers import build_container

container = build_container()
app = create_app(container)
