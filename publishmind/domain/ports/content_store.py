"""Porta de leitura do repositório de conteúdo externo."""
from __future__ import annotations

from abc import ABC, abstractmethod

from publishmind.query.filters import EntryPage, EntryQuery


class ContentStore(ABC):
    """Define como as entradas são consultadas no repositório de conteúdo."""

    @abstractmethod
    async def get_entries(self, query: EntryQuery) -> EntryPage:
        """Executar a consulta e retornar as entradas com links resolvidos.

        Deve lançar ``ContentStoreConfigurationError`` quando as credenciais
        não estão disponíveis e ``ContentStoreError`` em falhas remotas.
        """

    async def aclose(self) -> None:
        """Liberar recursos de rede mantidos pela implementação."""
