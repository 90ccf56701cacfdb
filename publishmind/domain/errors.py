"""Exceções de domínio compartilhadas pelas camadas do PublishMind."""
from __future__ import annotations


class PublishMindError(RuntimeError):
    """Base para os erros previstos pela aplicação."""


class ContentStoreConfigurationError(PublishMindError):
    """Credenciais do repositório de conteúdo ausentes ou incompletas.

    Diferente de um resultado vazio: indica que a consulta não pôde ser
    executada.
    """


class ContentStoreError(PublishMindError):
    """Falha remota ao consultar o repositório de conteúdo."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WebhookConfigurationError(PublishMindError):
    """URL do webhook de automação não configurada."""


class WebhookError(PublishMindError):
    """O webhook de automação respondeu com erro ou ficou inacessível."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


__all__ = [
    "ContentStoreConfigurationError",
    "ContentStoreError",
    "PublishMindError",
    "WebhookConfigurationError",
    "WebhookError",
]
