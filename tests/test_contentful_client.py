"""Testes do cliente da Content Delivery API com transporte HTTP simulado."""
from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from publishmind.domain.errors import ContentStoreConfigurationError, ContentStoreError
from publishmind.infrastructure import ContentfulDeliveryClient
from publishmind.infrastructure.contentful import resolve_links, serialize_predicate, sort_entries
from publishmind.query import PublicationQueryTranslator, PublicationRequest
from publishmind.settings import ContentfulSettings

SETTINGS = ContentfulSettings(
    space_id="space",
    access_token="delivery-token",
    preview_token="preview-token",
)


def _entry(entry_id: str, created_at: str, **fields):
    return {
        "sys": {"id": entry_id, "type": "Entry", "createdAt": created_at},
        "fields": {"slug": entry_id, **fields},
    }


def _client(handler, *, settings=SETTINGS, preview=False) -> ContentfulDeliveryClient:
    base_url = "https://preview.contentful.com" if preview else "https://cdn.contentful.com"
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)
    return ContentfulDeliveryClient(settings, preview=preview, client=http)


def test_single_branch_query_serializes_parameters_and_resolves_links():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "total": 1,
                "skip": 0,
                "limit": 10,
                "items": [
                    _entry(
                        "pub-1",
                        "2024-01-01T00:00:00Z",
                        categoria={"sys": {"type": "Link", "linkType": "Entry", "id": "cat-1"}},
                        imagenDestacada={"sys": {"type": "Link", "linkType": "Asset", "id": "img"}},
                    )
                ],
                "includes": {
                    "Entry": [
                        {
                            "sys": {"id": "cat-1", "type": "Entry"},
                            "fields": {"nombre": "Tecnología", "slug": "tecnologia"},
                        }
                    ],
                    "Asset": [
                        {
                            "sys": {"id": "img", "type": "Asset"},
                            "fields": {"file": {"url": "//img/x.png", "contentType": "image/png"}},
                        }
                    ],
                },
            },
        )

    query = PublicationQueryTranslator().translate(
        PublicationRequest(category_slug="tecnologia", tag="react")
    )
    page = asyncio.run(_client(handler).get_entries(query))

    (request,) = requests
    assert request.url.path == "/spaces/space/environments/master/entries"
    assert request.headers["Authorization"] == "Bearer delivery-token"
    params = request.url.params
    assert params["content_type"] == "publicacion"
    assert params["order"] == "-sys.createdAt"
    assert params["limit"] == "10"
    assert params["include"] == "2"
    assert params["fields.categoria.sys.contentType.sys.id"] == "categoria"
    assert params["fields.categoria.fields.slug"] == "tecnologia"
    assert params["fields.tags"] == "react"
    assert "skip" not in params

    assert page.total == 1
    (item,) = page.items
    assert item["fields"]["categoria"]["fields"]["slug"] == "tecnologia"
    assert item["fields"]["imagenDestacada"]["fields"]["file"]["url"] == "//img/x.png"


def test_tag_with_comma_is_sent_as_a_single_value():
    query = PublicationQueryTranslator().translate(PublicationRequest(tag="c,c++"))
    (tag_predicate,) = [item for item in query.predicates if item.path == "fields.tags"]

    assert serialize_predicate(tag_predicate) == ("fields.tags", "c,c++")


def test_text_search_fans_out_and_merges_branches():
    seen: list[str] = []
    by_field = {
        "fields.titulo[match]": [_entry("a", "2024-01-03T00:00:00Z"), _entry("b", "2024-01-01T00:00:00Z")],
        "fields.tags[match]": [_entry("c", "2024-01-02T00:00:00Z"), _entry("a", "2024-01-03T00:00:00Z")],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        key = next(name for name in request.url.params if name.endswith("[match]"))
        seen.append(key)
        items = by_field.get(key, [])
        return httpx.Response(200, json={"total": len(items), "items": items})

    query = PublicationQueryTranslator().translate(PublicationRequest(text="react", limit=2))
    page = asyncio.run(_client(handler).get_entries(query))

    assert sorted(seen) == sorted(
        [
            "fields.titulo[match]",
            "fields.contenido[match]",
            "fields.autor[match]",
            "fields.tags[match]",
            "fields.categoria.fields.nombre[match]",
        ]
    )
    assert [item["sys"]["id"] for item in page.items] == ["a", "c"]
    assert page.total == 3
    assert page.limit == 2


def test_missing_credentials_raise_configuration_error_without_request(caplog):
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("nenhuma requisição deveria ser feita")

    client = _client(handler, settings=ContentfulSettings(space_id="space"))
    query = PublicationQueryTranslator().categories()

    with caplog.at_level(logging.ERROR, logger="publishmind.contentful"):
        with pytest.raises(ContentStoreConfigurationError) as excinfo:
            asyncio.run(client.get_entries(query))

    assert "CONTENTFUL_ACCESS_TOKEN" in str(excinfo.value)
    assert not client.is_configured


def test_error_status_raises_content_store_error(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    client = _client(handler)

    with caplog.at_level(logging.ERROR, logger="publishmind.contentful"):
        with pytest.raises(ContentStoreError) as excinfo:
            asyncio.run(client.get_entries(PublicationQueryTranslator().categories()))

    assert excinfo.value.status_code == 503
    assert "upstream down" in caplog.text


def test_connection_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(ContentStoreError) as excinfo:
        asyncio.run(_client(handler).get_entries(PublicationQueryTranslator().categories()))

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_preview_mode_uses_preview_token():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"total": 0, "items": []})

    asyncio.run(
        _client(handler, preview=True).get_entries(PublicationQueryTranslator().by_slug("x"))
    )

    (request,) = captured
    assert request.url.host == "preview.contentful.com"
    assert request.headers["Authorization"] == "Bearer preview-token"


def test_resolve_links_stops_on_cycles_and_keeps_unknown_links():
    payload = {
        "items": [
            {
                "sys": {"id": "a", "type": "Entry"},
                "fields": {
                    "self": {"sys": {"type": "Link", "linkType": "Entry", "id": "a"}},
                    "missing": {"sys": {"type": "Link", "linkType": "Asset", "id": "zz"}},
                },
            }
        ]
    }

    (item,) = resolve_links(payload)

    assert item["fields"]["self"]["sys"]["type"] == "Link"
    assert item["fields"]["missing"]["sys"]["id"] == "zz"


def test_sort_entries_applies_descending_order():
    entries = [
        _entry("old", "2023-01-01T00:00:00Z"),
        _entry("new", "2024-01-01T00:00:00Z"),
    ]

    assert [e["sys"]["id"] for e in sort_entries(entries, "-sys.createdAt")] == ["new", "old"]
