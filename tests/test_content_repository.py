import asyncio
import logging

import pytest

from conftest import FakeContentStore, publication_entry
from publishmind.application import ContentRepository
from publishmind.domain.errors import ContentStoreConfigurationError
from publishmind.query import PublicationRequest


def test_category_filter_returns_only_matching_publications(categories, publication_entries):
    salud = categories["salud"]
    extra = publication_entry("pub-5", "Yoga", "yoga", category=salud)
    store = FakeContentStore([*publication_entries, extra, *categories.values()])
    repository = ContentRepository(store)

    page = asyncio.run(
        repository.list_publications(PublicationRequest(category_slug="tecnologia", limit=100))
    )

    assert {item.slug for item in page.items} == {
        "introduccion-a-react",
        "python-para-datos",
        "hooks-avanzados",
    }
    assert page.total == 3


def test_tag_filter_is_exact_match(store):
    repository = ContentRepository(store)

    page = asyncio.run(repository.list_publications(PublicationRequest(tag="react")))

    assert [item.id for item in page.items] == ["pub-1", "pub-3"]


def test_publications_are_listed_most_recent_first(store):
    page = asyncio.run(ContentRepository(store).list_publications())

    assert [item.id for item in page.items] == ["pub-1", "pub-2", "pub-3", "pub-4"]
    assert page.items[0].category.name == "Tecnología"


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_search_issues_no_query(store, text):
    page = asyncio.run(ContentRepository(store).search(text))

    assert page.items == ()
    assert page.total == 0
    assert store.queries == []


def test_search_matches_any_field(store):
    repository = ContentRepository(store)

    by_tag = asyncio.run(repository.search("python"))
    by_category = asyncio.run(repository.search("salud"))
    by_author = asyncio.run(repository.search("ana"))

    assert [item.id for item in by_tag.items] == ["pub-2"]
    assert [item.id for item in by_category.items] == ["pub-4"]
    assert [item.id for item in by_author.items] == ["pub-1"]


def test_remote_failure_becomes_empty_page(failing_store, caplog):
    repository = ContentRepository(failing_store)

    with caplog.at_level(logging.ERROR, logger="publishmind.repository"):
        page = asyncio.run(repository.search("react"))

    assert page.items == ()
    assert page.total == 0
    assert "503" in caplog.text


def test_configuration_error_is_not_swallowed(store):
    store.error = ContentStoreConfigurationError("Contentful client not configured")

    with pytest.raises(ContentStoreConfigurationError):
        asyncio.run(ContentRepository(store).list_publications())


def test_get_publication_by_slug(store):
    repository = ContentRepository(store)

    found = asyncio.run(repository.get_publication("dormir-mejor"))
    missing = asyncio.run(repository.get_publication("no-existe"))

    assert found.title == "Dormir mejor"
    assert found.category.slug == "salud"
    assert missing is None


def test_get_publications_by_ids(store):
    repository = ContentRepository(store)

    publications = asyncio.run(repository.get_publications_by_ids(["pub-3", "pub-1"]))

    assert [item.id for item in publications] == ["pub-1", "pub-3"]
    assert asyncio.run(repository.get_publications_by_ids([])) == []


def test_categories_are_ordered_by_name(store):
    repository = ContentRepository(store)

    categories = asyncio.run(repository.list_categories())

    assert [category.slug for category in categories] == ["salud", "tecnologia"]
    assert asyncio.run(repository.get_category("salud")).name == "Salud"
    assert asyncio.run(repository.get_category("nada")) is None


def test_all_tags_is_distinct_vocabulary(make_store):
    store = make_store(
        [
            publication_entry("1", "Uno", "uno", tags=["a", "b"]),
            publication_entry("2", "Dos", "dos", tags=["b", "c"]),
            publication_entry("3", "Tres", "tres", tags=[]),
            publication_entry("4", "Cuatro", "cuatro"),
        ]
    )

    tags = asyncio.run(ContentRepository(store).all_tags())

    assert sorted(tags) == ["a", "b", "c"]
    assert store.queries[0].select == ("fields.tags",)


def test_related_publications_exclude_current(store):
    repository = ContentRepository(store)
    current = asyncio.run(repository.get_publication("python-para-datos"))

    related = asyncio.run(repository.related_publications(current))

    assert [item.slug for item in related] == ["introduccion-a-react", "hooks-avanzados"]


def test_preview_without_preview_store_is_a_configuration_error(store):
    with pytest.raises(ContentStoreConfigurationError):
        asyncio.run(ContentRepository(store).get_publication("x", preview=True))


def test_preview_reads_from_preview_store(store, make_store):
    drafts = make_store([publication_entry("d1", "Borrador", "borrador")])
    repository = ContentRepository(store, preview_store=drafts)

    draft = asyncio.run(repository.get_publication("borrador", preview=True))

    assert draft.title == "Borrador"
    assert store.queries == []
