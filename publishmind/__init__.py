"""PublishMind - site de conteúdo dinâmico apoiado no Contentful."""
from .application import ContentRepository, PageService
from .domain import Category, Publication
from .services.automation import build_automation_container
from .services.catalog import build_catalog_container

__all__ = [
    "Category",
    "ContentRepository",
    "PageService",
    "Publication",
    "build_automation_container",
    "build_catalog_container",
]
