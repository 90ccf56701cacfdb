"""Vocabulário e ranking de etiquetas."""
from .aggregator import (
    TagCount,
    distinct_tags,
    popular_tags,
    rank_tags,
    related_tags,
    unique_tags,
)

__all__ = [
    "TagCount",
    "distinct_tags",
    "popular_tags",
    "rank_tags",
    "related_tags",
    "unique_tags",
]
