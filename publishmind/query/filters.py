"""Predicados de filtro e consultas aceitos pelo repositório de conteúdo.

Os predicados formam um tipo soma fechado (:data:`Predicate`). Uma
:class:`EntryQuery` combina seus predicados de nível superior com AND;
:class:`AnyOf` expressa OR e :class:`AllOf` agrupa condições dentro de um
ramo de OR.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Equals:
    """Campo igual ao valor informado."""

    path: str
    value: str


@dataclass(frozen=True)
class In:
    """Campo (ou coleção) contém ao menos um dos valores, por igualdade exata."""

    path: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class Matches:
    """Busca textual do repositório aplicada a um único campo."""

    path: str
    text: str


@dataclass(frozen=True)
class AllOf:
    predicates: tuple["Predicate", ...]


@dataclass(frozen=True)
class AnyOf:
    predicates: tuple["Predicate", ...]


Predicate = Union[Equals, In, Matches, AllOf, AnyOf]


@dataclass(frozen=True)
class EntryQuery:
    """Consulta tipada a entradas de um único tipo de conteúdo."""

    content_type: str
    predicates: tuple[Predicate, ...] = ()
    order: str | None = None
    limit: int | None = None
    skip: int = 0
    include: int | None = None
    select: tuple[str, ...] = ()

    def with_predicates(self, *predicates: Predicate) -> "EntryQuery":
        return replace(self, predicates=self.predicates + tuple(predicates))


@dataclass(frozen=True)
class EntryPage:
    """Página de entradas devolvida pelo repositório, com links resolvidos."""

    items: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    total: int = 0
    skip: int = 0
    limit: int = 0


def expand_branches(predicates: tuple[Predicate, ...]) -> list[tuple[Predicate, ...]]:
    """Distribui os ``AnyOf`` em ramos conjuntivos (forma normal disjuntiva).

    Cada ramo retornado contém apenas ``Equals``, ``In`` e ``Matches`` e pode
    ser enviado como uma única requisição ao repositório.
    """

    branches: list[tuple[Predicate, ...]] = [()]
    for predicate in predicates:
        if isinstance(predicate, AllOf):
            options = expand_branches(predicate.predicates)
        elif isinstance(predicate, AnyOf):
            options = []
            for alternative in predicate.predicates:
                options.extend(expand_branches((alternative,)))
        else:
            options = [(predicate,)]
        branches = [branch + option for branch in branches for option in options]
    return branches


__all__ = [
    "AllOf",
    "AnyOf",
    "EntryPage",
    "EntryQuery",
    "Equals",
    "In",
    "Matches",
    "Predicate",
    "expand_branches",
]
