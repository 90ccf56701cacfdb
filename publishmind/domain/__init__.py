"""API pública do domínio do PublishMind.

Centraliza entidades, portas e exceções para que possam ser importadas
diretamente de ``publishmind.domain``.
"""

from .entities import (
    Asset,
    Category,
    Document,
    GenerationRequest,
    Publication,
    PublicationSubmission,
    UploadedImage,
)
from .errors import (
    ContentStoreConfigurationError,
    ContentStoreError,
    PublishMindError,
    WebhookConfigurationError,
    WebhookError,
)
from .ports import AutomationGateway, ContentStore

__all__ = [
    "Asset",
    "AutomationGateway",
    "Category",
    "ContentStore",
    "ContentStoreConfigurationError",
    "ContentStoreError",
    "Document",
    "GenerationRequest",
    "Publication",
    "PublicationSubmission",
    "PublishMindError",
    "UploadedImage",
    "WebhookConfigurationError",
    "WebhookError",
]
