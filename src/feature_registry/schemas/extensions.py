"""
Extension-point contribution models.

Features contribute these items to the host application's UI shell. The
registry only reads ``id``, ``position`` and ``order``; ``component`` and
``icon`` are opaque values handed back to the caller unchanged.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NavPosition(str, Enum):
    """Where a navigation entry is placed."""

    HEADER = "header"
    FOOTER = "footer"
    MOBILE = "mobile"
    ACCOUNT = "account"


class SectionPosition(str, Enum):
    """Where a property-page section is placed."""

    MAIN = "main"
    SIDEBAR = "sidebar"
    BOTTOM = "bottom"


class FilterType(str, Enum):
    """Kind of search filter control."""

    CHECKBOX = "checkbox"
    RANGE = "range"
    SELECT = "select"
    CUSTOM = "custom"


class Contribution(BaseModel):
    """Common base for all extension-point items."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(min_length=1, description="Item identifier")


class NavItem(Contribution):
    """Navigation entry."""

    label: str
    href: str
    icon: Any = None
    position: NavPosition
    order: int | None = None


class PropertyPageSection(Contribution):
    """Section rendered on a property detail page."""

    title: str
    component: Any
    position: SectionPosition
    order: int | None = None


class BookingStep(Contribution):
    """Step in the booking flow. Unlike other items, ``order`` is mandatory."""

    label: str
    icon: Any
    component: Any
    order: int
    required: bool = False


class SearchFilter(Contribution):
    """Filter control offered on the search page."""

    label: str
    type: FilterType
    component: Any = None
    order: int | None = None


class Overlay(Contribution):
    """Floating component mounted once in the layout (chat widgets, banners)."""

    component: Any
    order: int | None = None
