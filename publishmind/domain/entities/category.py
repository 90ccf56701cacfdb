"""Entidade que representa uma categoria de publicações."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .asset import Asset


@dataclass(frozen=True)
class Category:
    """Agrupamento temático ao qual cada publicação pertence."""

    #: Identificador opaco da entrada no repositório de conteúdo.
    id: str
    #: Nome exibido para a categoria.
    name: str
    #: Identificador único usado nas URLs.
    slug: str
    #: Texto opcional de apresentação da categoria.
    description: Optional[str] = None
    #: Imagem de capa opcional.
    image: Optional[Asset] = None

    @classmethod
    def from_entry(cls, data: Mapping[str, Any]) -> Optional["Category"]:
        """Converte uma entrada ``categoria`` resolvida em ``Category``."""

        if not isinstance(data, Mapping):
            return None
        fields = data.get("fields")
        if not isinstance(fields, Mapping) or not fields.get("slug"):
            return None
        sys = data.get("sys") or {}
        return cls(
            id=str(sys.get("id", "")),
            name=str(fields.get("nombre") or fields["slug"]),
            slug=str(fields["slug"]),
            description=fields.get("descripcion") or None,
            image=Asset.from_entry(fields.get("imagen")),
        )


__all__ = ["Category"]
