"""Tracked content collections.

A collection is one JSON document stored at a fixed path in the remote
repository. Each collection knows its default document, how long a loaded
copy may stay cached and how to validate it.
"""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from infrastructure.errors import ValidationIssue, validation_issues_from
from modules.content.schemas import (
    DEFAULT_NAVIGATION,
    DEFAULT_SITE_CONFIG,
    NavigationDocument,
    ResourcesDocument,
    SiteDocument,
)

NAVIGATION = "navigation"
SITE = "site"
RESOURCES = "resources"


@dataclass(frozen=True)
class TrackedCollection:
    """Description of one remotely stored document.

    Attributes:
        name: Collection name ("navigation", "site", "resources")
        path: Repository path of the JSON file
        schema: Pydantic model validating the document
        default_factory: Builds the document used when the file is empty or missing
        write_default: Create the remote file with the default when it is missing
        cache_ttl: Seconds a loaded copy stays cached
    """

    name: str
    path: str
    schema: Type[BaseModel]
    default_factory: Callable[[], Any]
    write_default: bool = True
    cache_ttl: float = 600.0

    @property
    def cache_key(self) -> str:
        return f"content:{self.name}"

    def default(self) -> Any:
        return self.default_factory()

    def validate(self, document: Any) -> List[ValidationIssue]:
        """Return validation issues; an empty list means the document is valid."""
        try:
            self.schema.model_validate(document)
        except ValidationError as exc:
            return validation_issues_from(exc)
        return []


DEFAULT_COLLECTIONS: List[TrackedCollection] = [
    TrackedCollection(
        name=NAVIGATION,
        path="navigation.json",
        schema=NavigationDocument,
        default_factory=lambda: copy.deepcopy(DEFAULT_NAVIGATION),
        cache_ttl=600.0,
    ),
    TrackedCollection(
        name=SITE,
        path="site.json",
        schema=SiteDocument,
        default_factory=lambda: copy.deepcopy(DEFAULT_SITE_CONFIG),
        cache_ttl=1800.0,
    ),
    TrackedCollection(
        name=RESOURCES,
        path="resources.json",
        schema=ResourcesDocument,
        default_factory=list,
        write_default=False,
        cache_ttl=600.0,
    ),
]


def collections_by_name(
    collections: Optional[List[TrackedCollection]] = None,
) -> Dict[str, TrackedCollection]:
    return {c.name: c for c in (collections or DEFAULT_COLLECTIONS)}
