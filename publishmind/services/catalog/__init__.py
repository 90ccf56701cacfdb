"""Catalog service dependency container."""

from .container import CatalogContainer, build_catalog_container

__all__ = ["CatalogContainer", "build_catalog_container"]
