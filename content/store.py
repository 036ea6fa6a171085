"""
content/store.py -- SQLAlchemy-backed persistence for the site's content.

Uses SQLAlchemy Core (not ORM) so the dataclasses in content/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. ContentStore is the repository (one
interface per collection). The _row_to_* functions are the mappers. Route
handlers never touch SQL directly.

Listing order is fixed per collection:
  publications   -- year desc, then newest first
  people         -- creation order
  news           -- date desc (latest view capped by the caller's limit)
  research areas -- creation order

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ContentStore("sqlite:///labsite.db")
    pub_id = store.create_publication(Publication(authors="A. Smith", title="...", journal="JACS", year="2024"))
    store.list_publications()
    store.delete_publication(pub_id)
    store.close()
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
    func,
    select,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from content.models import HOMEPAGE_DEFAULTS, HomePage, NewsItem, Person, Publication, ResearchArea

logger = logging.getLogger("labsite.content")

LATEST_NEWS_LIMIT = 5

_HOMEPAGE_ROW_ID = 1
_HOMEPAGE_OPTIONAL_FIELDS = {"site_title", "use_logo", "logo_image"}

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_publications = Table(
    "publications",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("authors", Text, nullable=False),
    Column("title", Text, nullable=False),
    Column("journal", String(255), nullable=False),
    Column("year", String(32), nullable=False),
    Column("created_at", String(32), nullable=False),
)

_people = Table(
    "people",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("role", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("category", String(20), nullable=False),
    Column("photo", Text),  # URL or data: URI
    Column("created_at", String(32), nullable=False),
)

_news = Table(
    "news",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("date", String(32), nullable=False),  # ISO 8601 UTC, sorts lexically
    Column("headline", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("tag", String(20), nullable=False),
    Column("created_at", String(32), nullable=False),
)

_research_areas = Table(
    "research_areas",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("photo", Text),
    Column("created_at", String(32), nullable=False),
)

# Single-row table: CHECK (id = 1) makes a second home page impossible, so two
# concurrent first reads cannot both insert.
_homepage = Table(
    "homepage",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("site_title", String(255), nullable=False),
    Column("use_logo", Boolean, nullable=False),
    Column("logo_image", Text),
    Column("hero_title", Text, nullable=False),
    Column("hero_description", Text, nullable=False),
    Column("about_paragraph1", Text, nullable=False),
    Column("about_paragraph2", Text, nullable=False),
    Column("updated_at", String(32), nullable=False),
    CheckConstraint("id = 1", name="ck_homepage_singleton"),
)

_COLLECTIONS = {
    "publications": _publications,
    "people": _people,
    "news": _news,
    "research_areas": _research_areas,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _new_id() -> str:
    return uuid.uuid4().hex


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ContentStore:
    """Repository for publications, people, news, research areas and the home page."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Shared plumbing
    # ------------------------------------------------------------------

    def _insert(self, table: Table, **values) -> str:
        record_id = _new_id()
        with self.engine.connect() as conn:
            conn.execute(table.insert().values(id=record_id, created_at=_now_iso(), **values))
            conn.commit()
        logger.info("Created %s record %s", table.name, record_id)
        return record_id

    def _get(self, table: Table, record_id: str):
        with self.engine.connect() as conn:
            return conn.execute(table.select().where(table.c.id == record_id)).fetchone()

    def _delete(self, table: Table, record_id: str) -> bool:
        """Delete one row by id. Returns False when no such row exists."""
        with self.engine.connect() as conn:
            result = conn.execute(table.delete().where(table.c.id == record_id))
            conn.commit()
        if result.rowcount > 0:
            logger.info("Deleted %s record %s", table.name, record_id)
            return True
        return False

    def count_records(self) -> dict[str, int]:
        """Return row counts per collection. Used by the diagnose CLI."""
        counts: dict[str, int] = {}
        with self.engine.connect() as conn:
            for name, table in _COLLECTIONS.items():
                counts[name] = conn.execute(select(func.count()).select_from(table)).scalar() or 0
        return counts

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    # ------------------------------------------------------------------
    # Publications
    # ------------------------------------------------------------------

    def create_publication(self, pub: Publication) -> str:
        return self._insert(
            _publications,
            authors=pub.authors,
            title=pub.title,
            journal=pub.journal,
            year=pub.year,
        )

    def get_publication(self, pub_id: str) -> Optional[Publication]:
        row = self._get(_publications, pub_id)
        return _row_to_publication(row) if row is not None else None

    def list_publications(self) -> list[Publication]:
        """Return all publications, newest year first; same-year entries newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _publications.select().order_by(
                    _publications.c.year.desc(),
                    _publications.c.created_at.desc(),
                )
            ).fetchall()
        return [_row_to_publication(r) for r in rows]

    def delete_publication(self, pub_id: str) -> bool:
        return self._delete(_publications, pub_id)

    # ------------------------------------------------------------------
    # People
    # ------------------------------------------------------------------

    def create_person(self, person: Person) -> str:
        return self._insert(
            _people,
            name=person.name,
            role=person.role,
            email=person.email,
            category=person.category,
            photo=person.photo,
        )

    def get_person(self, person_id: str) -> Optional[Person]:
        row = self._get(_people, person_id)
        return _row_to_person(row) if row is not None else None

    def list_people(self) -> list[Person]:
        with self.engine.connect() as conn:
            rows = conn.execute(_people.select().order_by(_people.c.created_at.asc())).fetchall()
        return [_row_to_person(r) for r in rows]

    def delete_person(self, person_id: str) -> bool:
        return self._delete(_people, person_id)

    # ------------------------------------------------------------------
    # News
    # ------------------------------------------------------------------

    def create_news(self, item: NewsItem) -> str:
        return self._insert(
            _news,
            date=item.date,
            headline=item.headline,
            content=item.content,
            tag=item.tag,
        )

    def get_news(self, news_id: str) -> Optional[NewsItem]:
        row = self._get(_news, news_id)
        return _row_to_news(row) if row is not None else None

    def list_news(self, limit: Optional[int] = None) -> list[NewsItem]:
        """Return news items, most recent date first. limit=None returns all."""
        query = _news.select().order_by(_news.c.date.desc(), _news.c.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_news(r) for r in rows]

    def list_latest_news(self) -> list[NewsItem]:
        return self.list_news(limit=LATEST_NEWS_LIMIT)

    def delete_news(self, news_id: str) -> bool:
        return self._delete(_news, news_id)

    # ------------------------------------------------------------------
    # Research areas
    # ------------------------------------------------------------------

    def create_research_area(self, area: ResearchArea) -> str:
        return self._insert(
            _research_areas,
            title=area.title,
            description=area.description,
            photo=area.photo,
        )

    def get_research_area(self, area_id: str) -> Optional[ResearchArea]:
        row = self._get(_research_areas, area_id)
        return _row_to_research_area(row) if row is not None else None

    def list_research_areas(self) -> list[ResearchArea]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                _research_areas.select().order_by(_research_areas.c.created_at.asc())
            ).fetchall()
        return [_row_to_research_area(r) for r in rows]

    def delete_research_area(self, area_id: str) -> bool:
        return self._delete(_research_areas, area_id)

    # ------------------------------------------------------------------
    # Home page (singleton)
    # ------------------------------------------------------------------

    def get_homepage(self) -> Optional[HomePage]:
        with self.engine.connect() as conn:
            row = conn.execute(_homepage.select().where(_homepage.c.id == _HOMEPAGE_ROW_ID)).fetchone()
        return _row_to_homepage(row) if row is not None else None

    def _insert_homepage(self, page: HomePage) -> None:
        with self.engine.connect() as conn:
            conn.execute(
                _homepage.insert().values(
                    id=_HOMEPAGE_ROW_ID,
                    site_title=page.site_title,
                    use_logo=page.use_logo,
                    logo_image=page.logo_image,
                    hero_title=page.hero_title,
                    hero_description=page.hero_description,
                    about_paragraph1=page.about_paragraph1,
                    about_paragraph2=page.about_paragraph2,
                    updated_at=_now_iso(),
                )
            )
            conn.commit()

    def get_or_create_homepage(self) -> HomePage:
        """Return the home page, seeding it with HOMEPAGE_DEFAULTS on first read.

        If a concurrent request inserts first, our insert fails on the primary
        key and we read back the row that won.
        """
        page = self.get_homepage()
        if page is not None:
            return page
        try:
            self._insert_homepage(HOMEPAGE_DEFAULTS)
            logger.info("Seeded default home page content")
        except IntegrityError:
            logger.debug("Home page created by a concurrent request")
        return self.get_homepage()

    def update_homepage(
        self,
        hero_title: str,
        hero_description: str,
        about_paragraph1: str,
        about_paragraph2: str,
        **optional,
    ) -> HomePage:
        """Overwrite the home page text and return the stored result.

        The four required fields are always written. optional may carry any
        of site_title, use_logo, logo_image; a key that is present is written
        even when its value is falsy (False, "", None), a key that is absent
        keeps the stored value (or the default when no page exists yet).
        Unknown keys raise ValueError.
        """
        unknown = set(optional) - _HOMEPAGE_OPTIONAL_FIELDS
        if unknown:
            raise ValueError(f"Unknown home page fields: {unknown!r}")

        required = {
            "hero_title": hero_title,
            "hero_description": hero_description,
            "about_paragraph1": about_paragraph1,
            "about_paragraph2": about_paragraph2,
        }
        if self.get_homepage() is None:
            try:
                self._insert_homepage(replace(HOMEPAGE_DEFAULTS, **required, **optional))
                return self.get_homepage()
            except IntegrityError:
                # Lost the race to a concurrent first read; fall through to update.
                pass

        with self.engine.connect() as conn:
            conn.execute(
                _homepage.update()
                .where(_homepage.c.id == _HOMEPAGE_ROW_ID)
                .values(**required, **optional, updated_at=_now_iso())
            )
            conn.commit()
        return self.get_homepage()

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_publication(row) -> Publication:
    return Publication(
        id=row.id,
        authors=row.authors,
        title=row.title,
        journal=row.journal,
        year=row.year,
        created_at=row.created_at,
    )


def _row_to_person(row) -> Person:
    return Person(
        id=row.id,
        name=row.name,
        role=row.role,
        email=row.email,
        category=row.category,
        photo=row.photo,
        created_at=row.created_at,
    )


def _row_to_news(row) -> NewsItem:
    return NewsItem(
        id=row.id,
        date=row.date,
        headline=row.headline,
        content=row.content,
        tag=row.tag,
        created_at=row.created_at,
    )


def _row_to_research_area(row) -> ResearchArea:
    return ResearchArea(
        id=row.id,
        title=row.title,
        description=row.description,
        photo=row.photo,
        created_at=row.created_at,
    )


def _row_to_homepage(row) -> HomePage:
    return HomePage(
        site_title=row.site_title,
        use_logo=bool(row.use_logo),
        logo_image=row.logo_image,
        hero_title=row.hero_title,
        hero_description=row.hero_description,
        about_paragraph1=row.about_paragraph1,
        about_paragraph2=row.about_paragraph2,
        updated_at=row.updated_at,
    )
