"""Entidades de domínio exibidas pelo site."""
from .asset import Asset
from .category import Category
from .publication import Publication, parse_timestamp
from .rich_text import (
    Document,
    Mark,
    Node,
    NodeKind,
    parse_document,
)
from .submission import GenerationRequest, PublicationSubmission, UploadedImage

__all__ = [
    "Asset",
    "Category",
    "Document",
    "GenerationRequest",
    "Mark",
    "Node",
    "NodeKind",
    "Publication",
    "PublicationSubmission",
    "UploadedImage",
    "parse_document",
    "parse_timestamp",
]
