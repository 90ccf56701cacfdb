"""Entidade que representa uma publicação do site."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from .asset import Asset
from .category import Category
from .rich_text import Document, parse_document


@dataclass(frozen=True)
class Publication:
    """Artigo somente leitura mantido no repositório de conteúdo."""

    #: Identificador opaco da entrada.
    id: str
    #: Título exibido da publicação.
    title: str
    #: Identificador único, minúsculo e hifenizado usado na URL.
    slug: str
    #: Corpo estruturado da publicação.
    body: Document = field(default_factory=Document)
    #: Data de publicação editorial (``fechaPublicacion``).
    published_at: Optional[datetime] = None
    #: Nome do autor, quando informado.
    author: Optional[str] = None
    #: Categoria à qual a publicação pertence.
    category: Optional[Category] = None
    #: Etiquetas livres, na ordem cadastrada.
    tags: tuple[str, ...] = ()
    #: Imagem de destaque opcional.
    featured_image: Optional[Asset] = None
    #: Momento de criação registrado pelo repositório.
    created_at: Optional[datetime] = None
    #: Momento da última alteração registrado pelo repositório.
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entry(cls, data: Mapping[str, Any]) -> Optional["Publication"]:
        """Converte uma entrada ``publicacion`` resolvida em ``Publication``.

        Entradas sem slug são descartadas retornando ``None``.
        """

        if not isinstance(data, Mapping):
            return None
        fields = data.get("fields")
        if not isinstance(fields, Mapping) or not fields.get("slug"):
            return None
        sys = data.get("sys") or {}
        raw_tags = fields.get("tags") or ()
        tags = tuple(str(tag) for tag in raw_tags if isinstance(tag, str) and tag)
        return cls(
            id=str(sys.get("id", "")),
            title=str(fields.get("titulo") or fields["slug"]),
            slug=str(fields["slug"]),
            body=parse_document(fields.get("contenido")),
            published_at=parse_timestamp(fields.get("fechaPublicacion")),
            author=fields.get("autor") or None,
            category=Category.from_entry(fields.get("categoria")),
            tags=tags,
            featured_image=Asset.from_entry(fields.get("imagenDestacada")),
            created_at=parse_timestamp(sys.get("createdAt")),
            updated_at=parse_timestamp(sys.get("updatedAt")),
        )


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Interpreta datas ISO 8601 devolvidas pelo Contentful."""

    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


__all__ = ["Publication", "parse_timestamp"]
