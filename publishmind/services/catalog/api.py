"""Rotas FastAPI de leitura do site: publicações, categorias, etiquetas e SEO."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, TypeVar

from fastapi import APIRouter, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from publishmind.application import PublicationPage
from publishmind.domain import Category, Publication
from publishmind.domain.errors import (
    ContentStoreConfigurationError,
    ContentStoreError,
    PublishMindError,
)
from publishmind.query import MAX_FETCH_SIZE, PublicationRequest
from publishmind.seo import PageMetadata
from publishmind.services.catalog import CatalogContainer

T = TypeVar("T")

_log = logging.getLogger("publishmind.api")


class CategoryResponse(BaseModel):
    """Categoria exibida na navegação e nas páginas de listagem."""

    #: Identificador da entrada no repositório de conteúdo.
    id: str
    #: Nome exibido da categoria.
    name: str
    #: Slug utilizado na URL ``/categoria/{slug}``.
    slug: str
    #: Descrição opcional mostrada no cabeçalho da página.
    description: str | None = None
    #: URL absoluta da imagem da categoria, quando existir.
    image_url: str | None = None


class PublicationResponse(BaseModel):
    """Resumo de uma publicação usado em cartões e listagens."""

    #: Identificador da entrada no repositório de conteúdo.
    id: str
    #: Título da publicação.
    title: str
    #: Slug utilizado na URL ``/publicacion/{slug}``.
    slug: str
    #: Resumo derivado do primeiro parágrafo do corpo.
    excerpt: str
    #: Autor informado, quando houver.
    author: str | None = None
    #: Categoria à qual a publicação pertence.
    category: CategoryResponse | None = None
    #: Etiquetas na ordem cadastrada.
    tags: list[str] = Field(default_factory=list)
    #: URL absoluta da imagem de destaque.
    image_url: str | None = None
    #: Data editorial de publicação em ISO 8601.
    published_at: str | None = None
    #: Criação da entrada em ISO 8601.
    created_at: str | None = None
    #: Última alteração da entrada em ISO 8601.
    updated_at: str | None = None


class MetadataResponse(BaseModel):
    """Metadados de SEO de uma página."""

    title: str
    description: str
    canonical_url: str
    keywords: list[str] = Field(default_factory=list)
    open_graph: dict[str, Any] = Field(default_factory=dict)
    twitter: dict[str, Any] = Field(default_factory=dict)
    structured_data: list[dict[str, Any]] = Field(default_factory=list)


class PublicationListResponse(BaseModel):
    """Página de publicações com o total de correspondências."""

    #: Publicações desta página, das mais recentes para as mais antigas.
    items: list[PublicationResponse]
    #: Total de publicações que atendem aos filtros.
    total: int
    #: Quantidade de publicações ignoradas antes desta página.
    skip: int = 0
    #: Tamanho máximo da página solicitada.
    limit: int = 0


class SearchResponse(BaseModel):
    """Resultado da busca textual."""

    items: list[PublicationResponse]
    total: int


class PublicationDetailResponse(PublicationResponse):
    """Publicação completa com corpo renderizado e relacionadas."""

    #: Corpo da publicação renderizado em HTML.
    html: str
    #: Metadados de SEO da página da publicação.
    metadata: MetadataResponse
    #: Outras publicações da mesma categoria.
    related: list[PublicationResponse] = Field(default_factory=list)


class CategoryPageResponse(BaseModel):
    """Conteúdo da página de uma categoria."""

    category: CategoryResponse
    publications: list[PublicationResponse]
    #: Etiquetas mais frequentes entre as publicações da categoria.
    popular_tags: list[str]
    metadata: MetadataResponse


class TagListResponse(BaseModel):
    """Vocabulário completo de etiquetas."""

    tags: list[str]


class TagPageResponse(BaseModel):
    """Conteúdo da página de uma etiqueta."""

    tag: str
    publications: list[PublicationResponse]
    #: Sugestões de outras etiquetas para navegação.
    related_tags: list[str]
    metadata: MetadataResponse


class HomeResponse(BaseModel):
    """Conteúdo da página inicial."""

    #: Publicação em destaque (a mais recente).
    featured: PublicationResponse | None = None
    publications: list[PublicationResponse]
    categories: list[CategoryResponse]
    tags: list[str]
    metadata: MetadataResponse


def configure_cors(app: FastAPI) -> None:
    """Aplica a configuração padrão de CORS utilizada pelo site."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def include_routes(app: FastAPI, container: CatalogContainer, *, prefix: str = "") -> None:
    """Registra as rotas de leitura, busca, sitemap e robots na aplicação."""

    router = APIRouter(prefix=prefix, tags=["Catálogo"])
    pages = container.page_service
    repository = container.repository
    metadata = container.metadata

    async def guard(awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except ContentStoreConfigurationError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except ContentStoreError as exc:
            raise HTTPException(
                status_code=502,
                detail="No fue posible obtener el contenido",
            ) from exc

    def map_category(category: Category) -> CategoryResponse:
        return CategoryResponse(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            image_url=category.image.absolute_url if category.image else None,
        )

    def map_publication(publication: Publication) -> PublicationResponse:
        return PublicationResponse(
            id=publication.id,
            title=publication.title,
            slug=publication.slug,
            excerpt=metadata.describe(publication),
            author=publication.author,
            category=map_category(publication.category) if publication.category else None,
            tags=list(publication.tags),
            image_url=(
                publication.featured_image.absolute_url if publication.featured_image else None
            ),
            published_at=_isoformat(publication.published_at),
            created_at=_isoformat(publication.created_at),
            updated_at=_isoformat(publication.updated_at),
        )

    def map_metadata(page_metadata: PageMetadata) -> MetadataResponse:
        return MetadataResponse(**page_metadata.to_dict())

    def map_page(page: PublicationPage) -> PublicationListResponse:
        return PublicationListResponse(
            items=[map_publication(item) for item in page.items],
            total=page.total,
            skip=page.skip,
            limit=page.limit,
        )

    @router.get("/api/search", response_model=SearchResponse)
    async def search(q: str | None = None):
        """Busca publicações por título, conteúdo, autor, etiquetas ou categoria."""

        if not q or not q.strip():
            return JSONResponse(content={"items": []})
        try:
            page = await repository.search(q)
        except PublishMindError as exc:
            _log.error("erro na busca por %r: %s", q, exc)
            return JSONResponse(
                status_code=500,
                content={"error": "Search failed", "items": []},
            )
        return SearchResponse(
            items=[map_publication(item) for item in page.items],
            total=page.total,
        )

    @router.get("/api/publicaciones", response_model=PublicationListResponse)
    async def list_publications(
        limit: int = Query(10, ge=1, le=MAX_FETCH_SIZE),
        skip: int = Query(0, ge=0),
        categoria: str | None = None,
        tag: str | None = None,
    ) -> PublicationListResponse:
        """Lista publicações filtradas por categoria e/ou etiqueta."""

        request = PublicationRequest(limit=limit, skip=skip, category_slug=categoria, tag=tag)
        return map_page(await guard(repository.list_publications(request)))

    @router.get("/api/publicaciones/{slug}", response_model=PublicationDetailResponse)
    async def get_publication(slug: str, preview: bool = False) -> PublicationDetailResponse:
        """Obtém a publicação completa com o corpo renderizado."""

        view = await guard(pages.publication(slug, preview=preview))
        if view is None:
            raise HTTPException(status_code=404, detail="Publicación no encontrada")
        summary = map_publication(view.publication)
        return PublicationDetailResponse(
            **summary.model_dump(),
            html=view.html,
            metadata=map_metadata(view.metadata),
            related=[map_publication(item) for item in view.related],
        )

    @router.get("/api/categorias", response_model=list[CategoryResponse])
    async def list_categories() -> list[CategoryResponse]:
        """Lista as categorias em ordem alfabética."""

        return [map_category(category) for category in await guard(pages.categories())]

    @router.get("/api/categorias/{slug}", response_model=CategoryPageResponse)
    async def get_category(slug: str) -> CategoryPageResponse:
        view = await guard(pages.category(slug))
        if view is None:
            raise HTTPException(status_code=404, detail="Categoría no encontrada")
        return CategoryPageResponse(
            category=map_category(view.category),
            publications=[map_publication(item) for item in view.publications],
            popular_tags=list(view.popular_tags),
            metadata=map_metadata(view.metadata),
        )

    @router.get("/api/etiquetas", response_model=TagListResponse)
    async def list_tags() -> TagListResponse:
        return TagListResponse(tags=await guard(pages.tags()))

    @router.get("/api/etiquetas/{tag}", response_model=TagPageResponse)
    async def get_tag(tag: str) -> TagPageResponse:
        """Publicações de uma etiqueta; 404 quando nenhuma a utiliza."""

        view = await guard(pages.tag(tag))
        if view is None:
            raise HTTPException(status_code=404, detail="Etiqueta no encontrada")
        return TagPageResponse(
            tag=view.tag,
            publications=[map_publication(item) for item in view.publications],
            related_tags=list(view.related_tags),
            metadata=map_metadata(view.metadata),
        )

    @router.get("/api/home", response_model=HomeResponse)
    async def home() -> HomeResponse:
        view = await guard(pages.home())
        return HomeResponse(
            featured=map_publication(view.featured) if view.featured else None,
            publications=[map_publication(item) for item in view.publications],
            categories=[map_category(category) for category in view.categories],
            tags=list(view.tags),
            metadata=map_metadata(view.metadata),
        )

    @router.get("/api/ultimas-publicaciones", response_model=PublicationListResponse)
    async def latest(page: int = Query(1, ge=1)) -> PublicationListResponse:
        """Publicações mais recentes, paginadas de 12 em 12."""

        return map_page(await guard(pages.latest(page)))

    async def sitemap() -> Response:
        try:
            xml = await pages.sitemap()
        except PublishMindError as exc:
            _log.error("erro ao gerar o sitemap: %s", exc)
            return PlainTextResponse("Error generating sitemap", status_code=500)
        return Response(content=xml, media_type="application/xml")

    def robots() -> PlainTextResponse:
        return PlainTextResponse(pages.robots())

    for path in ("/sitemap.xml", "/api/sitemap"):
        router.add_api_route(path, sitemap, methods=["GET"], include_in_schema=False)
    for path in ("/robots.txt", "/api/robots"):
        router.add_api_route(path, robots, methods=["GET"], include_in_schema=False)

    app.include_router(router)


__all__ = [
    "CategoryPageResponse",
    "CategoryResponse",
    "HomeResponse",
    "MetadataResponse",
    "PublicationDetailResponse",
    "PublicationListResponse",
    "PublicationResponse",
    "SearchResponse",
    "TagListResponse",
    "TagPageResponse",
    "configure_cors",
    "include_routes",
]
