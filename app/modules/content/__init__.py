"""Remote content documents: navigation, site configuration and resources."""

from modules.content.tracked import (
    DEFAULT_COLLECTIONS,
    NAVIGATION,
    RESOURCES,
    SITE,
    TrackedCollection,
)
from modules.content.service import ContentService

__all__ = [
    "ContentService",
    "DEFAULT_COLLECTIONS",
    "NAVIGATION",
    "RESOURCES",
    "SITE",
    "TrackedCollection",
]
