"""Unit tests for content/store.py -- collection ordering, deletes and the home page singleton.

Covers:
- publications sort by year desc, then newest first within a year
- people and research areas keep creation order
- news sorts by date desc; the latest view holds at most 5
- deleting an unknown id returns False and leaves the collection alone
- get_or_create_homepage() seeds defaults once
- update_homepage() optional-field semantics
"""

import pytest

from content.models import HOMEPAGE_DEFAULTS, NewsItem, Person, Publication, ResearchArea


def _pub(year, title=None):
    return Publication(authors="A. Author", title=title or f"Paper {year}", journal="J. Green Chem.", year=year)


class TestPublications:
    def test_sorted_by_year_descending(self, content_store):
        for year in ("2020", "2022", "2021"):
            content_store.create_publication(_pub(year))
        assert [p.year for p in content_store.list_publications()] == ["2022", "2021", "2020"]

    def test_same_year_newest_first(self, content_store):
        content_store.create_publication(_pub("2023", title="first"))
        content_store.create_publication(_pub("2023", title="second"))
        assert [p.title for p in content_store.list_publications()] == ["second", "first"]

    def test_create_assigns_id_and_timestamp(self, content_store):
        pub_id = content_store.create_publication(_pub("2024"))
        pub = content_store.get_publication(pub_id)
        assert pub.id == pub_id
        assert pub.created_at

    def test_delete(self, content_store):
        pub_id = content_store.create_publication(_pub("2024"))
        assert content_store.delete_publication(pub_id) is True
        assert content_store.get_publication(pub_id) is None

    def test_delete_unknown_leaves_collection_unchanged(self, content_store):
        content_store.create_publication(_pub("2024"))
        assert content_store.delete_publication("no-such-id") is False
        assert len(content_store.list_publications()) == 1


class TestPeopleAndResearchAreas:
    def test_people_in_creation_order(self, content_store):
        for name in ("Zed", "Amy", "Mo"):
            content_store.create_person(Person(name=name, role="PhD Student", email=f"{name}@lab.org", category="phd"))
        assert [p.name for p in content_store.list_people()] == ["Zed", "Amy", "Mo"]

    def test_person_photo_is_optional(self, content_store):
        person_id = content_store.create_person(Person(name="Ann", role="PI", email="ann@lab.org", category="pi"))
        assert content_store.get_person(person_id).photo is None

    def test_research_areas_in_creation_order(self, content_store):
        for title in ("Organocatalysis", "Flow chemistry"):
            content_store.create_research_area(ResearchArea(title=title, description="..."))
        assert [a.title for a in content_store.list_research_areas()] == ["Organocatalysis", "Flow chemistry"]

    def test_delete_unknown_person_and_area(self, content_store):
        assert content_store.delete_person("missing") is False
        assert content_store.delete_research_area("missing") is False


class TestNews:
    def _news(self, day):
        return NewsItem(
            date=f"2024-01-{day:02d}T00:00:00+00:00",
            headline=f"Day {day}",
            content="...",
            tag="Award",
        )

    def test_sorted_by_date_descending(self, content_store):
        for day in (3, 9, 1):
            content_store.create_news(self._news(day))
        assert [n.headline for n in content_store.list_news()] == ["Day 9", "Day 3", "Day 1"]

    def test_latest_caps_at_five_most_recent(self, content_store):
        for day in (4, 1, 7, 2, 6, 3, 5):
            content_store.create_news(self._news(day))
        latest = content_store.list_latest_news()
        assert [n.headline for n in latest] == ["Day 7", "Day 6", "Day 5", "Day 4", "Day 3"]
        assert len(content_store.list_news()) == 7


class TestHomePage:
    def test_absent_until_first_read(self, content_store):
        assert content_store.get_homepage() is None

    def test_get_or_create_seeds_defaults_once(self, content_store):
        first = content_store.get_or_create_homepage()
        second = content_store.get_or_create_homepage()
        assert first.hero_title == HOMEPAGE_DEFAULTS.hero_title
        assert first.site_title == HOMEPAGE_DEFAULTS.site_title
        assert first.use_logo is False
        assert first.logo_image is None
        assert second == first

    def test_update_without_existing_page_uses_defaults_for_optional(self, content_store):
        page = content_store.update_homepage("Hero", "Desc", "P1", "P2")
        assert page.hero_title == "Hero"
        assert page.site_title == HOMEPAGE_DEFAULTS.site_title
        assert page.use_logo is False

    def test_update_without_existing_page_applies_provided_optional(self, content_store):
        page = content_store.update_homepage("Hero", "Desc", "P1", "P2", site_title="My Lab", use_logo=True)
        assert page.site_title == "My Lab"
        assert page.use_logo is True

    def test_omitted_optional_fields_keep_stored_values(self, content_store):
        content_store.update_homepage(
            "Hero", "Desc", "P1", "P2", site_title="My Lab", use_logo=True, logo_image="x.png"
        )
        page = content_store.update_homepage("Hero 2", "Desc 2", "P1b", "P2b")
        assert page.hero_title == "Hero 2"
        assert page.about_paragraph2 == "P2b"
        assert page.site_title == "My Lab"
        assert page.use_logo is True
        assert page.logo_image == "x.png"

    def test_explicit_falsy_values_overwrite(self, content_store):
        content_store.update_homepage(
            "Hero", "Desc", "P1", "P2", site_title="My Lab", use_logo=True, logo_image="x.png"
        )
        page = content_store.update_homepage("Hero", "Desc", "P1", "P2", site_title="", use_logo=False, logo_image=None)
        assert page.site_title == ""
        assert page.use_logo is False
        assert page.logo_image is None

    def test_update_refreshes_timestamp(self, content_store):
        seeded = content_store.get_or_create_homepage()
        page = content_store.update_homepage("Hero", "Desc", "P1", "P2")
        assert page.updated_at >= seeded.updated_at
        assert page.hero_title == "Hero"

    def test_unknown_optional_field_rejected(self, content_store):
        with pytest.raises(ValueError):
            content_store.update_homepage("Hero", "Desc", "P1", "P2", footer="nope")
