"""
API request and response models for the lab site REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in content/models.py and
auth/models.py, which own the internal domain representation. Route handlers
map between the two.

JSON field names are camelCase (siteTitle, createdAt, ...) to match the
website front end; Python attribute names stay snake_case via the to_camel
alias generator. populate_by_name lets tests and internal callers use either.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from auth.models import Admin
from content.models import HomePage, NewsItem, Person, Publication, ResearchArea


def _not_blank(value: str) -> str:
    # Blank counts as missing; the stored value keeps its original whitespace.
    if not value.strip():
        raise PydanticCustomError("blank", "Field required")
    return value


_Required = Annotated[str, AfterValidator(_not_blank)]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PersonCategory(str, Enum):
    pi = "pi"
    postdoc = "postdoc"
    phd = "phd"
    technician = "technician"


class NewsTag(str, Enum):
    Funding = "Funding"
    Award = "Award"
    Publication = "Publication"
    Conference = "Conference"
    Outreach = "Outreach"
    Team = "Team"


# ---------------------------------------------------------------------------
# Errors and acknowledgements
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on 4xx/5xx responses.

    error is the human-readable message; code is a stable machine value.
    """

    model_config = ConfigDict(frozen=True)

    error: str
    code: str


class DeleteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login.

    Both fields are optional at the schema level so the route can answer a
    missing value with its own 400 message instead of the generic one.
    """

    email: Optional[str] = None
    password: Optional[str] = None


class AdminInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str

    @classmethod
    def from_admin(cls, admin: Admin) -> "AdminInfo":
        return cls(id=admin.id, email=admin.email, name=admin.name)


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    token: str
    admin: AdminInfo


class VerifyResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    admin: AdminInfo


# ---------------------------------------------------------------------------
# Publications
# ---------------------------------------------------------------------------


class PublicationCreate(_RequestModel):
    authors: _Required
    title: _Required
    journal: _Required
    year: _Required

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, value):
        """Accept a bare number (2024) as well as text ("2024")."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class PublicationResponse(_ResponseModel):
    id: str
    authors: str
    title: str
    journal: str
    year: str
    created_at: str

    @classmethod
    def from_domain(cls, pub: Publication) -> "PublicationResponse":
        return cls(
            id=pub.id,
            authors=pub.authors,
            title=pub.title,
            journal=pub.journal,
            year=pub.year,
            created_at=pub.created_at,
        )


# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------


class PersonCreate(_RequestModel):
    name: _Required
    role: _Required
    email: _Required
    category: PersonCategory
    photo: Optional[str] = None


class PersonResponse(_ResponseModel):
    id: str
    name: str
    role: str
    email: str
    category: PersonCategory
    photo: Optional[str] = None
    created_at: str

    @classmethod
    def from_domain(cls, person: Person) -> "PersonResponse":
        return cls(
            id=person.id,
            name=person.name,
            role=person.role,
            email=person.email,
            category=person.category,
            photo=person.photo,
            created_at=person.created_at,
        )


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------


class NewsCreate(_RequestModel):
    date: _Required
    headline: _Required
    content: _Required
    tag: NewsTag

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: str) -> str:
        """Parse an ISO 8601 date or datetime and store it as a UTC timestamp.

        "2024-05-01" becomes "2024-05-01T00:00:00+00:00". A single stored
        format keeps lexical ORDER BY equal to chronological order.
        """
        try:
            parsed = datetime.fromisoformat(value.strip())
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            # Offsets near year 1 or 9999 can push the UTC value out of range.
            return parsed.astimezone(timezone.utc).isoformat()
        except (ValueError, OverflowError) as exc:
            raise ValueError("date must be an ISO 8601 date, e.g. 2024-05-01") from exc


class NewsResponse(_ResponseModel):
    id: str
    date: str
    headline: str
    content: str
    tag: NewsTag
    created_at: str

    @classmethod
    def from_domain(cls, item: NewsItem) -> "NewsResponse":
        return cls(
            id=item.id,
            date=item.date,
            headline=item.headline,
            content=item.content,
            tag=item.tag,
            created_at=item.created_at,
        )


# ---------------------------------------------------------------------------
# Research areas
# ---------------------------------------------------------------------------


class ResearchAreaCreate(_RequestModel):
    title: _Required
    description: _Required
    photo: Optional[str] = None


class ResearchAreaResponse(_ResponseModel):
    id: str
    title: str
    description: str
    photo: Optional[str] = None
    created_at: str

    @classmethod
    def from_domain(cls, area: ResearchArea) -> "ResearchAreaResponse":
        return cls(
            id=area.id,
            title=area.title,
            description=area.description,
            photo=area.photo,
            created_at=area.created_at,
        )


# ---------------------------------------------------------------------------
# Home page
# ---------------------------------------------------------------------------


class HomePageUpdate(_RequestModel):
    """Body of PUT /api/homepage.

    The optional fields only take effect when present in the request body
    (model_fields_set), so an explicit false or "" overwrites the stored
    value while an omitted field leaves it alone.
    """

    hero_title: _Required
    hero_description: _Required
    about_paragraph1: _Required
    about_paragraph2: _Required
    site_title: str = ""
    use_logo: bool = False
    logo_image: Optional[str] = None

    def provided_optional_fields(self) -> dict:
        optional = ("site_title", "use_logo", "logo_image")
        return {name: getattr(self, name) for name in optional if name in self.model_fields_set}


class HomePageData(_ResponseModel):
    site_title: str
    use_logo: bool
    logo_image: Optional[str] = None
    hero_title: str
    hero_description: str
    about_paragraph1: str
    about_paragraph2: str
    updated_at: str

    @classmethod
    def from_domain(cls, page: HomePage) -> "HomePageData":
        return cls(
            site_title=page.site_title,
            use_logo=page.use_logo,
            logo_image=page.logo_image,
            hero_title=page.hero_title,
            hero_description=page.hero_description,
            about_paragraph1=page.about_paragraph1,
            about_paragraph2=page.about_paragraph2,
            updated_at=page.updated_at,
        )


class HomePageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    data: HomePageData
