"""Serialização do sitemap XML e da política de robots."""
from __future__ import annotations

from typing import Iterable
from urllib.parse import quote
from xml.etree.ElementTree import Element, SubElement, tostring

from publishmind.domain import Category, Publication

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

#: Rotas estáticas com frequência de alteração e prioridade.
STATIC_ROUTES: tuple[tuple[str, str, str], ...] = (
    ("", "daily", "1.0"),
    ("/categorias", "weekly", "0.8"),
    ("/etiquetas", "weekly", "0.8"),
)


def _add_url(
    root: Element,
    loc: str,
    changefreq: str,
    priority: str,
    lastmod: str | None = None,
) -> None:
    url_el = SubElement(root, "url")
    SubElement(url_el, "loc").text = loc
    if lastmod:
        SubElement(url_el, "lastmod").text = lastmod
    SubElement(url_el, "changefreq").text = changefreq
    SubElement(url_el, "priority").text = priority


def build_sitemap(
    base_url: str,
    publications: Iterable[Publication],
    categories: Iterable[Category],
    tags: Iterable[str],
) -> str:
    """Monta o sitemap com rotas estáticas, publicações, categorias e etiquetas."""

    base_url = base_url.rstrip("/")
    root = Element("urlset", attrib={"xmlns": SITEMAP_NAMESPACE})

    for path, changefreq, priority in STATIC_ROUTES:
        _add_url(root, f"{base_url}{path}", changefreq, priority)

    for publication in publications:
        modified = publication.updated_at or publication.created_at
        _add_url(
            root,
            f"{base_url}/publicacion/{publication.slug}",
            "monthly",
            "0.6",
            lastmod=modified.isoformat() if modified else None,
        )

    for category in categories:
        _add_url(root, f"{base_url}/categoria/{category.slug}", "weekly", "0.7")

    for tag in tags:
        _add_url(root, f"{base_url}/etiqueta/{quote(tag, safe='')}", "weekly", "0.5")

    body = tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


def build_robots(base_url: str) -> str:
    """Política de robots que referencia o sitemap do site."""

    base_url = base_url.rstrip("/")
    lines = [
        "# https://www.robotstxt.org/robotstxt.html",
        "User-agent: *",
        "Allow: /",
        "Disallow: /api/*",
        "",
        "# Host",
        f"Host: {base_url}",
        "",
        "# Sitemaps",
        f"Sitemap: {base_url}/sitemap.xml",
    ]
    return "\n".join(lines) + "\n"


__all__ = ["SITEMAP_NAMESPACE", "STATIC_ROUTES", "build_robots", "build_sitemap"]
