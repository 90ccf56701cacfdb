"""Fixtures compartilhadas: repositório de conteúdo em memória e construtores de entradas."""
from __future__ import annotations

from typing import Any, Callable, Iterable

import pytest

from publishmind.domain.errors import ContentStoreError
from publishmind.domain.ports import ContentStore
from publishmind.query import AllOf, AnyOf, EntryPage, EntryQuery, Equals, In, Matches, Predicate


def rich_document(*paragraphs: str) -> dict[str, Any]:
    return {
        "nodeType": "document",
        "data": {},
        "content": [
            {
                "nodeType": "paragraph",
                "data": {},
                "content": [{"nodeType": "text", "value": text, "marks": [], "data": {}}],
            }
            for text in paragraphs
        ],
    }


def category_entry(
    entry_id: str, name: str, slug: str, description: str | None = None
) -> dict[str, Any]:
    fields: dict[str, Any] = {"nombre": name, "slug": slug}
    if description is not None:
        fields["descripcion"] = description
    return {
        "sys": {
            "id": entry_id,
            "type": "Entry",
            "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": "categoria"}},
        },
        "fields": fields,
    }


def publication_entry(
    entry_id: str,
    title: str,
    slug: str,
    *,
    category: dict[str, Any] | None = None,
    tags: Iterable[str] | None = None,
    body: Iterable[str] = (),
    author: str | None = None,
    created_at: str = "2024-01-01T00:00:00Z",
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "titulo": title,
        "slug": slug,
        "contenido": rich_document(*body),
    }
    if category is not None:
        fields["categoria"] = category
    if tags is not None:
        fields["tags"] = list(tags)
    if author is not None:
        fields["autor"] = author
    return {
        "sys": {
            "id": entry_id,
            "type": "Entry",
            "createdAt": created_at,
            "updatedAt": created_at,
            "contentType": {
                "sys": {"type": "Link", "linkType": "ContentType", "id": "publicacion"}
            },
        },
        "fields": fields,
    }


def _lookup(entry: Any, path: str) -> Any:
    value = entry
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _matches(entry: dict[str, Any], predicate: Predicate) -> bool:
    if isinstance(predicate, AllOf):
        return all(_matches(entry, item) for item in predicate.predicates)
    if isinstance(predicate, AnyOf):
        return any(_matches(entry, item) for item in predicate.predicates)
    value = _lookup(entry, predicate.path)
    values = value if isinstance(value, list) else [value]
    if isinstance(predicate, Equals):
        return predicate.value in values
    if isinstance(predicate, In):
        return any(item in predicate.values for item in values)
    if isinstance(predicate, Matches):
        needle = predicate.text.lower()
        return any(needle in str(item).lower() for item in values if item is not None)
    raise TypeError(predicate)


class FakeContentStore(ContentStore):
    """Repositório em memória que avalia os predicados das consultas."""

    def __init__(self, entries: Iterable[dict[str, Any]] = ()) -> None:
        self.entries = list(entries)
        self.queries: list[EntryQuery] = []
        self.error: Exception | None = None
        self.closed = False

    async def get_entries(self, query: EntryQuery) -> EntryPage:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        matched = [
            entry
            for entry in self.entries
            if _lookup(entry, "sys.contentType.sys.id") == query.content_type
            and all(_matches(entry, predicate) for predicate in query.predicates)
        ]
        if query.order:
            descending = query.order.startswith("-")
            path = query.order.lstrip("-")
            matched.sort(key=lambda entry: str(_lookup(entry, path) or ""), reverse=descending)
        limit = query.limit if query.limit is not None else 100
        window = matched[query.skip : query.skip + limit]
        if query.select:
            window = [
                {"sys": entry["sys"], "fields": {"tags": entry["fields"].get("tags")}}
                for entry in window
            ]
        return EntryPage(items=tuple(window), total=len(matched), skip=query.skip, limit=limit)

    async def aclose(self) -> None:
        self.closed = True


class PublicationOutageStore(FakeContentStore):
    """Falha apenas nas consultas completas de publicações."""

    async def get_entries(self, query: EntryQuery) -> EntryPage:
        if query.content_type == "publicacion" and not query.select:
            self.queries.append(query)
            raise ContentStoreError("Service Unavailable", status_code=503)
        return await super().get_entries(query)


@pytest.fixture
def categories() -> dict[str, dict[str, Any]]:
    return {
        "tecnologia": category_entry("cat-1", "Tecnología", "tecnologia", "Todo sobre software"),
        "salud": category_entry("cat-2", "Salud", "salud"),
    }


@pytest.fixture
def publication_entries(categories) -> list[dict[str, Any]]:
    tecnologia = categories["tecnologia"]
    return [
        publication_entry(
            "pub-1",
            "Introducción a React",
            "introduccion-a-react",
            category=tecnologia,
            tags=["react", "javascript"],
            body=["React es una biblioteca para construir interfaces."],
            author="Ana",
            created_at="2024-03-01T10:00:00Z",
        ),
        publication_entry(
            "pub-2",
            "Python para datos",
            "python-para-datos",
            category=tecnologia,
            tags=["python"],
            body=["Pandas facilita el análisis."],
            created_at="2024-02-01T10:00:00Z",
        ),
        publication_entry(
            "pub-3",
            "Hooks avanzados",
            "hooks-avanzados",
            category=tecnologia,
            tags=["react"],
            body=["Los hooks simplifican el estado."],
            created_at="2024-01-15T10:00:00Z",
        ),
        publication_entry(
            "pub-4",
            "Dormir mejor",
            "dormir-mejor",
            category=categories["salud"],
            body=["El descanso es clave."],
            created_at="2024-01-10T10:00:00Z",
        ),
    ]


@pytest.fixture
def make_store(categories, publication_entries) -> Callable[..., FakeContentStore]:
    def factory(entries: Iterable[dict[str, Any]] | None = None) -> FakeContentStore:
        if entries is None:
            entries = [*publication_entries, *categories.values()]
        return FakeContentStore(entries)

    return factory


@pytest.fixture
def store(make_store) -> FakeContentStore:
    return make_store()


@pytest.fixture
def failing_store(make_store) -> FakeContentStore:
    failing = make_store()
    failing.error = ContentStoreError("Contentful respondeu com status 503", status_code=503)
    return failing


@pytest.fixture
def outage_store(store) -> PublicationOutageStore:
    return PublicationOutageStore(store.entries)
