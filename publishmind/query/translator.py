"""Tradução de pedidos da aplicação para consultas do repositório de conteúdo."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .filters import AllOf, AnyOf, EntryQuery, Equals, In, Matches

PUBLICATION_CONTENT_TYPE = "publicacion"
CATEGORY_CONTENT_TYPE = "categoria"

DEFAULT_LIMIT = 10
#: Limite máximo de itens por requisição aceito pelo Contentful.
MAX_FETCH_SIZE = 1000
RECENT_FIRST = "-sys.createdAt"

_CATEGORY_LINK_TYPE = "fields.categoria.sys.contentType.sys.id"

#: Campos pesquisados pela busca textual, combinados com OR.
SEARCH_FIELDS: tuple[str, ...] = (
    "fields.titulo",
    "fields.contenido",
    "fields.autor",
    "fields.tags",
    "fields.categoria.fields.nombre",
)


@dataclass(frozen=True)
class PublicationRequest:
    """Pedido de listagem ou busca de publicações."""

    limit: int = DEFAULT_LIMIT
    skip: int = 0
    category_slug: Optional[str] = None
    tag: Optional[str] = None
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be a positive integer")
        if self.skip < 0:
            raise ValueError("skip must be a non-negative integer")

    @property
    def is_blank_search(self) -> bool:
        """Indica uma busca textual informada porém vazia."""

        return self.text is not None and not self.text.strip()


class PublicationQueryTranslator:
    """Monta as consultas de publicações, categorias e etiquetas."""

    def __init__(
        self,
        *,
        publication_type: str = PUBLICATION_CONTENT_TYPE,
        category_type: str = CATEGORY_CONTENT_TYPE,
    ) -> None:
        self._publication_type = publication_type
        self._category_type = category_type

    def translate(self, request: PublicationRequest) -> Optional[EntryQuery]:
        """Converte o pedido em consulta.

        Retorna ``None`` para buscas textuais em branco: nesse caso o resultado
        é vazio e nenhuma requisição deve ser emitida.
        """

        if request.is_blank_search:
            return None

        query = EntryQuery(
            content_type=self._publication_type,
            order=RECENT_FIRST,
            limit=min(request.limit, MAX_FETCH_SIZE),
            skip=request.skip,
            include=2,
        )
        if request.category_slug:
            query = query.with_predicates(*self._category_predicates(request.category_slug))
        if request.tag:
            query = query.with_predicates(Equals("fields.tags", request.tag))
        if request.text is not None:
            query = query.with_predicates(self._text_predicate(request.text.strip()))
        return query

    def by_slug(self, slug: str) -> EntryQuery:
        return EntryQuery(
            content_type=self._publication_type,
            predicates=(Equals("fields.slug", slug),),
            limit=1,
            include=2,
        )

    def by_ids(self, ids: Iterable[str]) -> EntryQuery:
        values = tuple(dict.fromkeys(ids))
        return EntryQuery(
            content_type=self._publication_type,
            predicates=(In("sys.id", values),),
            order=RECENT_FIRST,
            limit=max(1, min(len(values), MAX_FETCH_SIZE)),
            include=2,
        )

    def categories(self) -> EntryQuery:
        return EntryQuery(
            content_type=self._category_type,
            order="fields.nombre",
            include=1,
        )

    def category_by_slug(self, slug: str) -> EntryQuery:
        return EntryQuery(
            content_type=self._category_type,
            predicates=(Equals("fields.slug", slug),),
            limit=1,
            include=2,
        )

    def all_tags(self, max_items: int = MAX_FETCH_SIZE) -> EntryQuery:
        """Consulta apenas o campo de etiquetas de todas as publicações."""

        return EntryQuery(
            content_type=self._publication_type,
            select=("fields.tags",),
            limit=min(max_items, MAX_FETCH_SIZE),
        )

    def _category_predicates(self, slug: str) -> tuple[Equals, Equals]:
        return (
            Equals(_CATEGORY_LINK_TYPE, self._category_type),
            Equals("fields.categoria.fields.slug", slug),
        )

    def _text_predicate(self, text: str) -> AnyOf:
        branches = []
        for path in SEARCH_FIELDS:
            if path.startswith("fields.categoria.fields."):
                # Filtros sobre campos de entradas referenciadas exigem o tipo.
                branches.append(
                    AllOf((Equals(_CATEGORY_LINK_TYPE, self._category_type), Matches(path, text)))
                )
            else:
                branches.append(Matches(path, text))
        return AnyOf(tuple(branches))


__all__ = [
    "CATEGORY_CONTENT_TYPE",
    "DEFAULT_LIMIT",
    "MAX_FETCH_SIZE",
    "PUBLICATION_CONTENT_TYPE",
    "PublicationQueryTranslator",
    "PublicationRequest",
    "RECENT_FIRST",
    "SEARCH_FIELDS",
]
