"""Casos de uso de leitura de publicações, categorias e etiquetas."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from publishmind.domain import Category, Publication
from publishmind.domain.errors import ContentStoreConfigurationError, ContentStoreError
from publishmind.domain.ports import ContentStore
from publishmind.query import EntryPage, EntryQuery, PublicationQueryTranslator, PublicationRequest
from publishmind.tags import unique_tags


@dataclass(frozen=True)
class PublicationPage:
    """Página de publicações devolvida por listagens e buscas."""

    #: Publicações na ordem retornada pelo repositório.
    items: tuple[Publication, ...] = field(default_factory=tuple)
    #: Total de correspondências no repositório, não apenas nesta página.
    total: int = 0
    skip: int = 0
    limit: int = 0

    @classmethod
    def empty(cls, request: PublicationRequest) -> "PublicationPage":
        return cls(skip=request.skip, limit=request.limit)


class ContentRepository:
    """Fachada de leitura sobre o repositório de conteúdo.

    Falhas remotas em listagens e buscas são registradas e resultam em uma
    página vazia. Credenciais ausentes continuam sendo propagadas como
    ``ContentStoreConfigurationError``.
    """

    def __init__(
        self,
        store: ContentStore,
        *,
        preview_store: ContentStore | None = None,
        translator: PublicationQueryTranslator | None = None,
    ) -> None:
        self._store = store
        self._preview_store = preview_store
        self._translator = translator or PublicationQueryTranslator()
        self._log = logging.getLogger("publishmind.repository")

    async def list_publications(
        self, request: PublicationRequest | None = None, *, preview: bool = False
    ) -> PublicationPage:
        """Lista publicações filtradas por categoria e/ou etiqueta."""

        request = request or PublicationRequest()
        try:
            return await self.fetch_publications(request, preview=preview)
        except ContentStoreConfigurationError:
            raise
        except ContentStoreError as exc:
            self._log.error("falha ao consultar publicações: %s", exc)
            return PublicationPage.empty(request)

    async def fetch_publications(
        self, request: PublicationRequest, *, preview: bool = False
    ) -> PublicationPage:
        """Como :meth:`list_publications`, mas propaga ``ContentStoreError``.

        Usado pelas páginas que não podem ser montadas sem as publicações.
        """

        query = self._translator.translate(request)
        if query is None:
            return PublicationPage.empty(request)
        page = await self._store_for(preview).get_entries(query)
        return self._to_publication_page(page)

    async def search(
        self, text: str, *, limit: int = 10, skip: int = 0, preview: bool = False
    ) -> PublicationPage:
        """Busca textual em título, corpo, autor, etiquetas e categoria."""

        request = PublicationRequest(limit=limit, skip=skip, text=text)
        if request.is_blank_search:
            return PublicationPage.empty(request)
        self._log.debug("buscando publicações por %r", text)
        return await self.list_publications(request, preview=preview)

    async def get_publication(self, slug: str, *, preview: bool = False) -> Optional[Publication]:
        page = await self._store_for(preview).get_entries(self._translator.by_slug(slug))
        return next(self._publications(page.items), None)

    async def get_publications_by_ids(
        self, ids: Iterable[str], *, preview: bool = False
    ) -> list[Publication]:
        ids = [identifier for identifier in ids if identifier]
        if not ids:
            return []
        page = await self._store_for(preview).get_entries(self._translator.by_ids(ids))
        return list(self._publications(page.items))

    async def related_publications(
        self, publication: Publication, *, limit: int = 3
    ) -> list[Publication]:
        """Publicações da mesma categoria, sem incluir a própria publicação."""

        if publication.category is None:
            return []
        page = await self.list_publications(
            PublicationRequest(limit=limit + 1, category_slug=publication.category.slug)
        )
        related = [item for item in page.items if item.slug != publication.slug]
        return related[:limit]

    async def list_categories(self, *, preview: bool = False) -> list[Category]:
        page = await self._store_for(preview).get_entries(self._translator.categories())
        return [
            category
            for category in (Category.from_entry(item) for item in page.items)
            if category is not None
        ]

    async def get_category(self, slug: str, *, preview: bool = False) -> Optional[Category]:
        page = await self._store_for(preview).get_entries(self._translator.category_by_slug(slug))
        for item in page.items:
            category = Category.from_entry(item)
            if category is not None:
                return category
        return None

    async def all_tags(self, *, preview: bool = False) -> list[str]:
        """Vocabulário de etiquetas de todas as publicações."""

        page = await self._store_for(preview).get_entries(self._translator.all_tags())
        return unique_tags((item.get("fields") or {}).get("tags") for item in page.items)

    async def fetch(self, query: EntryQuery, *, preview: bool = False) -> EntryPage:
        """Executa uma consulta arbitrária já traduzida."""

        return await self._store_for(preview).get_entries(query)

    async def aclose(self) -> None:
        await self._store.aclose()
        if self._preview_store is not None:
            await self._preview_store.aclose()

    def _store_for(self, preview: bool) -> ContentStore:
        if not preview:
            return self._store
        if self._preview_store is None:
            self._log.error("modo preview solicitado sem CONTENTFUL_PREVIEW_TOKEN")
            raise ContentStoreConfigurationError(
                "Contentful preview client not configured - check CONTENTFUL_PREVIEW_TOKEN"
            )
        return self._preview_store

    def _to_publication_page(self, page: EntryPage) -> PublicationPage:
        items = tuple(self._publications(page.items))
        return PublicationPage(items=items, total=page.total, skip=page.skip, limit=page.limit)

    def _publications(self, entries) -> Iterable[Publication]:
        for entry in entries:
            publication = Publication.from_entry(entry)
            if publication is None:
                self._log.warning("entrada sem slug ignorada: %s", (entry.get("sys") or {}).get("id"))
                continue
            yield publication


__all__ = ["ContentRepository", "PublicationPage"]
