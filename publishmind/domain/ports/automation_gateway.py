"""Porta de saída para o serviço externo de automação de conteúdo."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from publishmind.domain.entities import GenerationRequest, PublicationSubmission


class AutomationGateway(ABC):
    """Encaminha pedidos de criação de conteúdo ao fluxo de automação."""

    @abstractmethod
    async def submit_publication(self, submission: PublicationSubmission) -> dict[str, Any]:
        """Enviar uma publicação manual e retornar a resposta do serviço."""

    @abstractmethod
    async def generate_content(self, request: GenerationRequest) -> dict[str, Any]:
        """Solicitar a geração automática de conteúdo a partir de uma ideia."""

    async def aclose(self) -> None:
        """Liberar recursos de rede mantidos pela implementação."""
