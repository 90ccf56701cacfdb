"""Composição dos dados de cada página do site."""
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Optional

from publishmind.domain import Category, Publication
from publishmind.query import MAX_FETCH_SIZE, PublicationRequest
from publishmind.rendering import RichTextRenderer
from publishmind.seo import PageMetadata, SiteMetadataGenerator, build_robots, build_sitemap
from publishmind.tags import popular_tags, related_tags

from .content_repository import ContentRepository, PublicationPage

HOME_PAGE_SIZE = 7
LATEST_PAGE_SIZE = 12
LISTING_PAGE_SIZE = 100
RELATED_PUBLICATIONS = 3
RELATED_TAGS = 15
POPULAR_TAGS = 20


@dataclass(frozen=True)
class HomePage:
    publications: tuple[Publication, ...]
    categories: tuple[Category, ...]
    tags: tuple[str, ...]
    metadata: PageMetadata

    @property
    def featured(self) -> Optional[Publication]:
        return self.publications[0] if self.publications else None


@dataclass(frozen=True)
class PublicationView:
    """Publicação pronta para exibição, com o corpo já em HTML."""

    publication: Publication
    html: str
    metadata: PageMetadata
    related: tuple[Publication, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CategoryView:
    category: Category
    publications: tuple[Publication, ...]
    popular_tags: tuple[str, ...]
    metadata: PageMetadata


@dataclass(frozen=True)
class TagView:
    tag: str
    publications: tuple[Publication, ...]
    related_tags: tuple[str, ...]
    metadata: PageMetadata


class PageService:
    """Reúne as leituras independentes de cada página em paralelo.

    Erros de configuração são sempre propagados. Início e últimas publicações
    aceitam uma listagem vazia; categoria, etiqueta e sitemap propagam
    ``ContentStoreError`` em vez de montar uma página parcial.
    """

    def __init__(
        self,
        repository: ContentRepository,
        metadata: SiteMetadataGenerator,
        *,
        renderer: RichTextRenderer | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repository = repository
        self._metadata = metadata
        self._renderer = renderer or RichTextRenderer()
        self._rng = rng

    @property
    def repository(self) -> ContentRepository:
        return self._repository

    async def home(self) -> HomePage:
        page, categories, tags = await asyncio.gather(
            self._repository.list_publications(PublicationRequest(limit=HOME_PAGE_SIZE)),
            self._repository.list_categories(),
            self._repository.all_tags(),
        )
        return HomePage(
            publications=page.items,
            categories=tuple(categories),
            tags=tuple(tags),
            metadata=self._metadata.home(),
        )

    async def latest(self, page: int = 1) -> PublicationPage:
        """Página ``page`` (a partir de 1) das publicações mais recentes."""

        if page < 1:
            raise ValueError("page must be a positive integer")
        request = PublicationRequest(limit=LATEST_PAGE_SIZE, skip=(page - 1) * LATEST_PAGE_SIZE)
        return await self._repository.list_publications(request)

    async def publication(self, slug: str, *, preview: bool = False) -> Optional[PublicationView]:
        publication = await self._repository.get_publication(slug, preview=preview)
        if publication is None:
            return None
        related = await self._repository.related_publications(
            publication, limit=RELATED_PUBLICATIONS
        )
        return PublicationView(
            publication=publication,
            html=str(self._renderer.render(publication.body)),
            metadata=self._metadata.publication(publication),
            related=tuple(related),
        )

    async def category(self, slug: str) -> Optional[CategoryView]:
        category, page = await asyncio.gather(
            self._repository.get_category(slug),
            self._repository.fetch_publications(
                PublicationRequest(limit=LISTING_PAGE_SIZE, category_slug=slug)
            ),
        )
        if category is None:
            return None
        return CategoryView(
            category=category,
            publications=page.items,
            popular_tags=tuple(popular_tags(page.items, POPULAR_TAGS)),
            metadata=self._metadata.category(category),
        )

    async def tag(self, tag: str) -> Optional[TagView]:
        """Página de uma etiqueta; ``None`` quando nenhuma publicação a usa."""

        page, tags = await asyncio.gather(
            self._repository.fetch_publications(
                PublicationRequest(limit=LISTING_PAGE_SIZE, tag=tag)
            ),
            self._repository.all_tags(),
        )
        if not page.items:
            return None
        return TagView(
            tag=tag,
            publications=page.items,
            related_tags=tuple(related_tags(tags, tag, RELATED_TAGS, rng=self._rng)),
            metadata=self._metadata.tag(tag),
        )

    async def categories(self) -> list[Category]:
        return await self._repository.list_categories()

    async def tags(self) -> list[str]:
        return sorted(await self._repository.all_tags(), key=str.casefold)

    async def sitemap(self) -> str:
        page, categories, tags = await asyncio.gather(
            self._repository.fetch_publications(PublicationRequest(limit=MAX_FETCH_SIZE)),
            self._repository.list_categories(),
            self._repository.all_tags(),
        )
        return build_sitemap(self._metadata.site.url, page.items, categories, tags)

    def robots(self) -> str:
        return build_robots(self._metadata.site.url)


__all__ = [
    "CategoryView",
    "HomePage",
    "PageService",
    "PublicationView",
    "TagView",
]
