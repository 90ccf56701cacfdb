"""Geração de metadados de página e dados estruturados (schema.org)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence
from urllib.parse import quote

from publishmind.domain import Category, Document, Publication
from publishmind.domain.entities.rich_text import first_paragraph_text
from publishmind.settings import SiteSettings

DESCRIPTION_MAX_LENGTH = 160
_ELLIPSIS = "..."


def truncate_description(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Limita o texto a ``max_length`` caracteres, reticências incluídas."""

    text = text.strip()
    if len(text) <= max_length:
        return text
    return f"{text[: max_length - len(_ELLIPSIS)]}{_ELLIPSIS}"


def extract_description(
    document: Document | None,
    fallback: str,
    max_length: int = DESCRIPTION_MAX_LENGTH,
) -> str:
    """Descrição derivada do primeiro parágrafo com texto do documento."""

    if document is None:
        return fallback
    text = first_paragraph_text(document)
    if not text:
        return fallback
    return truncate_description(text, max_length)


@dataclass(frozen=True)
class PageMetadata:
    """Metadados de uma página prontos para serialização."""

    title: str
    description: str
    canonical_url: str
    keywords: tuple[str, ...] = ()
    open_graph: dict[str, Any] = field(default_factory=dict)
    twitter: dict[str, Any] = field(default_factory=dict)
    structured_data: tuple[dict[str, Any], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "canonical_url": self.canonical_url,
            "keywords": list(self.keywords),
            "open_graph": self.open_graph,
            "twitter": self.twitter,
            "structured_data": list(self.structured_data),
        }


class SiteMetadataGenerator:
    """Mapeia entidades para metadados de SEO do site."""

    def __init__(self, site: SiteSettings) -> None:
        self._site = site

    @property
    def site(self) -> SiteSettings:
        return self._site

    def url_for(self, path: str = "") -> str:
        return f"{self._site.url}{path}"

    def describe(self, publication: Publication) -> str:
        return extract_description(publication.body, self._site.description)

    def publication_image(self, publication: Publication) -> str:
        if publication.featured_image is not None:
            return publication.featured_image.absolute_url
        return self._site.og_image

    def home(self) -> PageMetadata:
        site = self._site
        return PageMetadata(
            title=site.name,
            description=site.description,
            canonical_url=site.url,
            keywords=("blog", "contenido", "publicaciones", "artículos"),
            open_graph={
                "type": "website",
                "locale": site.locale,
                "url": site.url,
                "title": site.name,
                "description": site.description,
                "site_name": site.name,
                "images": [{"url": site.og_image}],
            },
            twitter=self._twitter(site.name, site.description, site.og_image),
            structured_data=(self.website_structured_data(),),
        )

    def publication(self, publication: Publication) -> PageMetadata:
        url = self.url_for(f"/publicacion/{publication.slug}")
        description = self.describe(publication)
        image = self.publication_image(publication)
        author = publication.author or self._site.name
        breadcrumbs = [{"name": "Inicio", "url": "/"}]
        if publication.category is not None:
            breadcrumbs.append(
                {
                    "name": publication.category.name,
                    "url": f"/categoria/{publication.category.slug}",
                }
            )
        breadcrumbs.append(
            {"name": publication.title, "url": f"/publicacion/{publication.slug}"}
        )
        return PageMetadata(
            title=publication.title,
            description=description,
            canonical_url=url,
            keywords=publication.tags,
            open_graph={
                "type": "article",
                "url": url,
                "title": publication.title,
                "description": description,
                "images": [{"url": image}],
                "published_time": _isoformat(publication.published_at),
                "modified_time": _isoformat(publication.updated_at),
                "authors": [author],
                "tags": list(publication.tags),
            },
            twitter=self._twitter(publication.title, description, image),
            structured_data=(
                self.article_structured_data(publication),
                self.breadcrumb_structured_data(breadcrumbs),
            ),
        )

    def category(self, category: Category) -> PageMetadata:
        url = self.url_for(f"/categoria/{category.slug}")
        title = f"{category.name} | Categoría"
        description = (
            category.description
            or f"Explora todas las publicaciones en la categoría {category.name}"
        )
        image = category.image.absolute_url if category.image else self._site.og_image
        return PageMetadata(
            title=title,
            description=description,
            canonical_url=url,
            open_graph={
                "type": "website",
                "url": url,
                "title": title,
                "description": description,
                "images": [{"url": image}],
            },
            twitter=self._twitter(title, description, image),
            structured_data=(
                self.breadcrumb_structured_data(
                    [
                        {"name": "Inicio", "url": "/"},
                        {"name": "Categorías", "url": "/categorias"},
                        {"name": category.name, "url": f"/categoria/{category.slug}"},
                    ]
                ),
            ),
        )

    def tag(self, tag: str) -> PageMetadata:
        site = self._site
        path = f"/etiqueta/{quote(tag, safe='')}"
        url = self.url_for(path)
        title = f"Publicaciones sobre {tag} | {site.name}"
        description = f"Explora las últimas publicaciones etiquetadas con {tag} en {site.name}"
        social_description = f"Artículos y contenido relacionado con {tag}"
        image = self.url_for("/og-image.png")
        return PageMetadata(
            title=title,
            description=description,
            canonical_url=url,
            keywords=(tag,),
            open_graph={
                "type": "website",
                "locale": site.locale,
                "url": url,
                "title": title,
                "description": social_description,
                "site_name": site.name,
                "images": [{"url": image, "width": 1200, "height": 630}],
            },
            twitter=self._twitter(title, social_description, image),
            structured_data=(
                self.breadcrumb_structured_data(
                    [
                        {"name": "Inicio", "url": "/"},
                        {"name": "Etiquetas", "url": "/etiquetas"},
                        {"name": tag, "url": path},
                    ]
                ),
            ),
        )

    def article_structured_data(self, publication: Publication) -> dict[str, Any]:
        site = self._site
        data: dict[str, Any] = {
            "@context": "https://schema.org",
            "@type": "BlogPosting",
            "headline": publication.title,
            "description": self.describe(publication),
            "image": self.publication_image(publication),
            "datePublished": _isoformat(publication.published_at),
            "dateModified": _isoformat(publication.updated_at),
            "author": {"@type": "Person", "name": publication.author or site.name},
            "publisher": {
                "@type": "Organization",
                "name": site.name,
                "logo": {"@type": "ImageObject", "url": self.url_for("/logo.png")},
            },
            "mainEntityOfPage": {
                "@type": "WebPage",
                "@id": self.url_for(f"/publicacion/{publication.slug}"),
            },
        }
        if publication.tags:
            data["keywords"] = ", ".join(publication.tags)
        return data

    def breadcrumb_structured_data(self, items: Sequence[dict[str, str]]) -> dict[str, Any]:
        return {
            "@context": "https://schema.org",
            "@type": "BreadcrumbList",
            "itemListElement": [
                {
                    "@type": "ListItem",
                    "position": index,
                    "name": item["name"],
                    "item": self.url_for(item["url"]),
                }
                for index, item in enumerate(items, start=1)
            ],
        }

    def website_structured_data(self) -> dict[str, Any]:
        site = self._site
        return {
            "@context": "https://schema.org",
            "@type": "WebSite",
            "name": site.name,
            "description": site.description,
            "url": site.url,
            "potentialAction": {
                "@type": "SearchAction",
                "target": self.url_for("/buscar?q={search_term_string}"),
                "query-input": "required name=search_term_string",
            },
        }

    def _twitter(self, title: str, description: str, image: str) -> dict[str, Any]:
        return {
            "card": "summary_large_image",
            "title": title,
            "description": description,
            "images": [image],
            "creator": self._site.twitter,
        }


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "PageMetadata",
    "SiteMetadataGenerator",
    "extract_description",
    "truncate_description",
]
