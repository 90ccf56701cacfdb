"""Metadados de SEO, sitemap e robots."""
from .metadata import (
    DESCRIPTION_MAX_LENGTH,
    PageMetadata,
    SiteMetadataGenerator,
    extract_description,
    truncate_description,
)
from .sitemap import SITEMAP_NAMESPACE, build_robots, build_sitemap

__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "PageMetadata",
    "SITEMAP_NAMESPACE",
    "SiteMetadataGenerator",
    "build_robots",
    "build_sitemap",
    "extract_description",
    "truncate_description",
]
