"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.sync import SyncFeatureSettings

__all__ = [
    "SyncFeatureSettings",
]
