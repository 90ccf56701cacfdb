"""Casos de uso de leitura do site."""
from .content_repository import ContentRepository, PublicationPage
from .page_service import CategoryView, HomePage, PageService, PublicationView, TagView

__all__ = [
    "CategoryView",
    "ContentRepository",
    "HomePage",
    "PageService",
    "PublicationPage",
    "PublicationView",
    "TagView",
]
