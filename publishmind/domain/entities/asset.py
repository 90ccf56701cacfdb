"""Entidade que representa um arquivo de mídia do repositório de conteúdo."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Asset:
    """Arquivo publicado (normalmente uma imagem) referenciado por entradas."""

    #: Identificador opaco atribuído pelo repositório de conteúdo.
    id: str
    #: URL do arquivo; o Contentful devolve URLs relativas ao protocolo.
    url: str
    #: Tipo MIME declarado do arquivo.
    content_type: str
    #: Título cadastrado para o arquivo.
    title: Optional[str] = None
    #: Descrição usada como texto alternativo e legenda.
    description: Optional[str] = None
    #: Largura em pixels, quando o arquivo é uma imagem.
    width: Optional[int] = None
    #: Altura em pixels, quando o arquivo é uma imagem.
    height: Optional[int] = None

    @property
    def is_image(self) -> bool:
        return "image" in self.content_type

    @property
    def absolute_url(self) -> str:
        """URL com esquema explícito, pronta para uso em HTML e metadados."""

        if self.url.startswith("//"):
            return f"https:{self.url}"
        return self.url

    @classmethod
    def from_entry(cls, data: Mapping[str, Any]) -> Optional["Asset"]:
        """Reconstrói o arquivo a partir de um ``Asset`` resolvido da API.

        Retorna ``None`` quando o payload ainda é um link não resolvido ou não
        possui arquivo associado.
        """

        if not isinstance(data, Mapping):
            return None
        fields = data.get("fields")
        if not isinstance(fields, Mapping):
            return None
        file_info = fields.get("file")
        if not isinstance(file_info, Mapping) or not file_info.get("url"):
            return None
        details = file_info.get("details") or {}
        image = details.get("image") if isinstance(details, Mapping) else None
        width = height = None
        if isinstance(image, Mapping):
            width = _as_int(image.get("width"))
            height = _as_int(image.get("height"))
        sys = data.get("sys") or {}
        return cls(
            id=str(sys.get("id", "")),
            url=str(file_info["url"]),
            content_type=str(file_info.get("contentType") or ""),
            title=fields.get("title"),
            description=fields.get("description"),
            width=width,
            height=height,
        )


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = ["Asset"]
