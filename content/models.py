"""
content/models.py -- Domain dataclasses for the site's content collections.

These are pure data containers with zero logic. Sorting, defaults and
persistence live in content/store.py; request validation (including the
closed category/tag value sets) lives in api/models.py.

id and created_at are None/"" before a record is written; the store assigns
both on insert.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Publication:
    authors: str
    title: str
    journal: str
    year: str  # free text, e.g. "2021" or "2021 (in press)"
    id: Optional[str] = None
    created_at: str = ""


@dataclass
class Person:
    """A group member shown on the people page."""

    name: str
    role: str  # display title, e.g. "Postdoctoral Researcher"
    email: str
    category: str  # "pi" | "postdoc" | "phd" | "technician"
    photo: Optional[str] = None  # URL or data: URI
    id: Optional[str] = None
    created_at: str = ""


@dataclass
class NewsItem:
    date: str  # ISO 8601, UTC
    headline: str
    content: str
    tag: str  # "Funding" | "Award" | "Publication" | "Conference" | "Outreach" | "Team"
    id: Optional[str] = None
    created_at: str = ""


@dataclass
class ResearchArea:
    title: str
    description: str
    photo: Optional[str] = None
    id: Optional[str] = None
    created_at: str = ""


@dataclass
class HomePage:
    """Singleton record behind the landing page.

    There is never more than one row; see ContentStore.get_or_create_homepage.
    """

    hero_title: str
    hero_description: str
    about_paragraph1: str
    about_paragraph2: str
    site_title: str = "Green Chemistry Research Group"
    use_logo: bool = False
    logo_image: Optional[str] = None
    updated_at: str = ""


# Text used when the home page is read before an admin has saved one.
HOMEPAGE_DEFAULTS = HomePage(
    site_title="Green Chemistry Research Group",
    use_logo=False,
    logo_image=None,
    hero_title="Advancing Sustainable Chemistry",
    hero_description=(
        "Pioneering research in green chemistry, organocatalysis, and physical organic chemistry "
        "to develop environmentally benign chemical processes for a sustainable future."
    ),
    about_paragraph1=(
        "The Green Chemistry Research Group is dedicated to developing innovative chemical "
        "methodologies that minimize environmental impact while maximizing efficiency and selectivity."
    ),
    about_paragraph2=(
        "We focus on designing sustainable synthetic routes, understanding reaction mechanisms "
        "at a molecular level, and developing novel catalytic systems."
    ),
)
