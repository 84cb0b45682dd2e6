"""Validation schemas for the tracked content documents.

Documents are stored remotely as plain JSON and handed to callers as plain
dicts and lists. These models only validate; loaded data is never replaced
by the parsed model, so unknown fields survive a load/save round trip.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StringConstraints,
    model_validator,
)
from pydantic_core import PydanticCustomError

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TITLE_LENGTH),
]
Description = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=1, max_length=MAX_DESCRIPTION_LENGTH
    ),
]
HttpUrl = Annotated[str, StringConstraints(pattern=r"^https?://.+")]
Email = Annotated[str, StringConstraints(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")]


class ContentModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class NavigationItem(ContentModel):
    """A link shown inside a navigation category."""

    id: RequiredText
    title: Title
    description: Description
    icon: RequiredText
    href: HttpUrl
    enabled: bool = True
    tags: List[str] = Field(default_factory=list)


class NavigationSubCategory(ContentModel):
    id: RequiredText
    title: Title
    items: List[NavigationItem] = Field(default_factory=list)
    enabled: bool = True


class NavigationCategory(ContentModel):
    """Top-level navigation group."""

    id: RequiredText
    title: Title
    items: List[NavigationItem] = Field(default_factory=list)
    sub_categories: List[NavigationSubCategory] = Field(
        default_factory=list, alias="subCategories"
    )
    enabled: bool = True
    order: Optional[int] = None


class NavigationDocument(RootModel[List[NavigationCategory]]):
    """The navigation document: a list of categories with unique ids."""

    @model_validator(mode="after")
    def check_unique_ids(self) -> "NavigationDocument":
        seen = set()
        for category in self.root:
            if category.id in seen:
                raise PydanticCustomError(
                    "duplicate",
                    'Category id "{id}" is duplicated',
                    {"id": category.id},
                )
            seen.add(category.id)
        return self


class SiteBasic(ContentModel):
    title: RequiredText
    description: RequiredText
    keywords: str = ""
    email: Optional[Email] = None
    url: Optional[HttpUrl] = None


class SiteAppearance(ContentModel):
    logo: str = ""
    favicon: str = ""
    theme: Literal["light", "dark", "system"] = "system"


class SiteDocument(ContentModel):
    """The site configuration document."""

    basic: SiteBasic
    appearance: SiteAppearance


class ResourcesDocument(RootModel[List[Dict[str, Any]]]):
    """The resources document: a list of free-form sections."""


DEFAULT_SITE_CONFIG: Dict[str, Any] = {
    "basic": {
        "title": "Navigation",
        "description": "Curated links and resources",
        "keywords": "navigation,bookmarks,resources",
    },
    "appearance": {
        "logo": "/favicon.ico",
        "favicon": "/favicon.ico",
        "theme": "system",
    },
}


DEFAULT_NAVIGATION: List[Dict[str, Any]] = [
    {
        "id": "dev-tools",
        "title": "Developer tools",
        "description": "Tools and references for development",
        "icon": "🛠️",
        "enabled": True,
        "items": [
            {
                "id": "github",
                "title": "GitHub",
                "description": "Code hosting platform",
                "icon": "https://github.com/favicon.ico",
                "href": "https://github.com",
                "enabled": True,
            },
            {
                "id": "python-docs",
                "title": "Python documentation",
                "description": "Language and standard library reference",
                "icon": "https://www.python.org/favicon.ico",
                "href": "https://docs.python.org/3/",
                "enabled": True,
            },
        ],
    },
]
