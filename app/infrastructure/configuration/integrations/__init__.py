"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.remote_store import (
    RemoteStoreSettings,
)

__all__ = [
    "RemoteStoreSettings",
]
