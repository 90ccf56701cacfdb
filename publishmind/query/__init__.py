"""Consultas ao repositório de conteúdo."""
from .filters import (
    AllOf,
    AnyOf,
    EntryPage,
    EntryQuery,
    Equals,
    In,
    Matches,
    Predicate,
    expand_branches,
)
from .translator import (
    CATEGORY_CONTENT_TYPE,
    MAX_FETCH_SIZE,
    PUBLICATION_CONTENT_TYPE,
    PublicationQueryTranslator,
    PublicationRequest,
)

__all__ = [
    "AllOf",
    "AnyOf",
    "CATEGORY_CONTENT_TYPE",
    "EntryPage",
    "EntryQuery",
    "Equals",
    "In",
    "MAX_FETCH_SIZE",
    "Matches",
    "PUBLICATION_CONTENT_TYPE",
    "Predicate",
    "PublicationQueryTranslator",
    "PublicationRequest",
    "expand_branches",
]
