"""Agregação de etiquetas derivadas das publicações.

Etiquetas não são armazenadas como entidades: o vocabulário e as contagens
são recalculados a cada leitura. A identidade é a string exata cadastrada.
"""
from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from publishmind.domain import Publication


@dataclass(frozen=True, slots=True)
class TagCount:
    tag: str
    count: int


def flatten_tags(tag_lists: Iterable[Iterable[str] | None]) -> Iterator[str]:
    for tags in tag_lists:
        for tag in tags or ():
            if isinstance(tag, str) and tag:
                yield tag


def iter_tags(publications: Iterable[Publication]) -> Iterator[str]:
    return flatten_tags(publication.tags for publication in publications)


def unique_tags(tag_lists: Iterable[Iterable[str] | None]) -> list[str]:
    """Vocabulário sem duplicatas a partir de listas brutas de etiquetas.

    A ordem da lista segue a primeira ocorrência, mas deve ser tratada como
    um conjunto pelos consumidores.
    """

    return list(dict.fromkeys(flatten_tags(tag_lists)))


def distinct_tags(publications: Iterable[Publication]) -> list[str]:
    return unique_tags(publication.tags for publication in publications)


def rank_tags(publications: Sequence[Publication], top_n: int | None = None) -> list[TagCount]:
    """Ordena as etiquetas pela frequência dentro da coleção informada.

    Empates preservam a ordem em que cada etiqueta apareceu pela primeira vez
    (``sorted`` é estável e ``Counter`` mantém a ordem de inserção).
    """

    counts = Counter(iter_tags(publications))
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if top_n is not None:
        ranked = ranked[: max(top_n, 0)]
    return [TagCount(tag=tag, count=count) for tag, count in ranked]


def popular_tags(publications: Sequence[Publication], top_n: int = 20) -> list[str]:
    return [item.tag for item in rank_tags(publications, top_n)]


def related_tags(
    tags: Iterable[str],
    exclude: str,
    limit: int = 15,
    *,
    rng: random.Random | None = None,
) -> list[str]:
    """Etiquetas sugeridas na página de uma etiqueta.

    Remove a etiqueta atual e, quando ``rng`` é informado, embaralha as
    restantes antes de truncar.
    """

    candidates = [tag for tag in dict.fromkeys(tags) if tag != exclude]
    if rng is not None:
        rng.shuffle(candidates)
    return candidates[: max(limit, 0)]


__all__ = [
    "TagCount",
    "distinct_tags",
    "flatten_tags",
    "iter_tags",
    "popular_tags",
    "rank_tags",
    "related_tags",
    "unique_tags",
]
