"""Dependency container for the catalog (read-only site) service."""
from __future__ import annotations

import random
from dataclasses import dataclass

from publishmind.application import ContentRepository, PageService
from publishmind.domain.ports import ContentStore
from publishmind.infrastructure import ContentfulDeliveryClient
from publishmind.rendering import RichTextRenderer
from publishmind.seo import SiteMetadataGenerator
from publishmind.settings import Settings, get_settings


@dataclass
class CatalogContainer:
    """Container exposing the catalog service dependencies."""

    settings: Settings
    repository: ContentRepository
    page_service: PageService
    metadata: SiteMetadataGenerator
    renderer: RichTextRenderer

    async def aclose(self) -> None:
        await self.repository.aclose()


def build_catalog_container(
    settings: Settings | None = None,
    *,
    store: ContentStore | None = None,
    preview_store: ContentStore | None = None,
    rng: random.Random | None = None,
) -> CatalogContainer:
    """Build the catalog service container."""

    settings = settings or get_settings()
    if store is None:
        store = ContentfulDeliveryClient(settings.contentful)
        if preview_store is None and settings.contentful.preview_token:
            preview_store = ContentfulDeliveryClient(settings.contentful, preview=True)

    repository = ContentRepository(store, preview_store=preview_store)
    metadata = SiteMetadataGenerator(settings.site)
    renderer = RichTextRenderer()
    page_service = PageService(repository, metadata, renderer=renderer, rng=rng)

    return CatalogContainer(
        settings=settings,
        repository=repository,
        page_service=page_service,
        metadata=metadata,
        renderer=renderer,
    )
