"""Pedidos de criação de conteúdo encaminhados ao serviço de automação."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class UploadedImage:
    """Arquivo de imagem enviado junto com uma publicação manual."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class PublicationSubmission:
    """Publicação redigida manualmente pelo formulário de criação."""

    #: Título informado pelo autor.
    title: str
    #: Corpo em texto livre (ou HTML do editor).
    body: str
    #: Slug da categoria escolhida.
    category: str
    #: Autor opcional.
    author: Optional[str] = None
    #: Etiquetas já separadas e sem espaços extras.
    tags: tuple[str, ...] = field(default_factory=tuple)
    #: Slug sugerido; o serviço de automação pode gerar outro.
    slug: Optional[str] = None
    #: Data de publicação em ISO 8601, quando informada.
    published_at: Optional[str] = None
    #: Imagem de destaque opcional.
    image: Optional[UploadedImage] = None

    @staticmethod
    def split_tags(raw: Optional[str]) -> tuple[str, ...]:
        """Separa etiquetas informadas como texto separado por vírgulas."""

        if not raw:
            return ()
        tags = (part.strip() for part in raw.split(","))
        return tuple(dict.fromkeys(tag for tag in tags if tag))


@dataclass(frozen=True)
class GenerationRequest:
    """Ideia enviada para geração automática de conteúdo."""

    prompt: str
    category: Optional[str] = None


__all__ = ["GenerationRequest", "PublicationSubmission", "UploadedImage"]
