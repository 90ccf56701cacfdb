"""Configurações compartilhadas carregadas a partir de variáveis de ambiente."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_API_BIND_HOST = "0.0.0.0"
_DEFAULT_API_PORT = 8000
_DEFAULT_SITE_URL = "https://publishmind.com"


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _optional_float(name: str) -> float | None:
    raw = _optional_env(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name!r} must be a number: {raw}") from exc


@dataclass(frozen=True)
class ContentfulSettings:
    """Credenciais do espaço Contentful usado como repositório de conteúdo."""

    space_id: str | None = None
    access_token: str | None = None
    preview_token: str | None = None
    environment: str = "master"
    timeout: float | None = None

    @classmethod
    def from_env(cls) -> "ContentfulSettings":
        return cls(
            space_id=_optional_env("CONTENTFUL_SPACE_ID"),
            access_token=_optional_env("CONTENTFUL_ACCESS_TOKEN"),
            preview_token=_optional_env("CONTENTFUL_PREVIEW_TOKEN"),
            environment=_optional_env("CONTENTFUL_ENVIRONMENT") or "master",
            timeout=_optional_float("CONTENTFUL_TIMEOUT"),
        )

    def token_for(self, preview: bool) -> str | None:
        return self.preview_token if preview else self.access_token

    def is_configured(self, preview: bool = False) -> bool:
        return bool(self.space_id and self.token_for(preview))


@dataclass(frozen=True)
class WebhookSettings:
    """URLs dos fluxos de automação (n8n) para criação de conteúdo."""

    manual_url: str | None = None
    auto_url: str | None = None
    timeout: float | None = None

    @classmethod
    def from_env(cls) -> "WebhookSettings":
        return cls(
            manual_url=_optional_env("N8N_WEBHOOK_MANUAL"),
            auto_url=_optional_env("N8N_WEBHOOK_AUTO"),
            timeout=_optional_float("N8N_WEBHOOK_TIMEOUT"),
        )


@dataclass(frozen=True)
class SiteSettings:
    """Identidade pública do site usada em metadados e no sitemap."""

    url: str = _DEFAULT_SITE_URL
    name: str = "PublishMind"
    description: str = (
        "Plataforma de contenido dinámico con publicaciones generadas manualmente "
        "y automáticamente."
    )
    og_image: str = "https://publishmind.com/og.jpg"
    twitter: str = "@PublishMind"
    locale: str = "es_ES"

    @classmethod
    def from_env(cls) -> "SiteSettings":
        url = _optional_env("PUBLISHMIND_SITE_URL") or _DEFAULT_SITE_URL
        return cls(url=url.rstrip("/"))


@dataclass(frozen=True)
class Settings:
    """Configuração completa construída uma única vez na inicialização."""

    contentful: ContentfulSettings = field(default_factory=ContentfulSettings)
    webhooks: WebhookSettings = field(default_factory=WebhookSettings)
    site: SiteSettings = field(default_factory=SiteSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            contentful=ContentfulSettings.from_env(),
            webhooks=WebhookSettings.from_env(),
            site=SiteSettings.from_env(),
        )


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Retorna a configuração do processo lida do ambiente."""

    return Settings.from_env()


@lru_cache(maxsize=None)
def get_api_port() -> int:
    """Retorna a porta configurada para expor a API."""

    return int(os.getenv("PUBLISHMIND_API_PORT", os.getenv("PORT", _DEFAULT_API_PORT)))


@lru_cache(maxsize=None)
def get_api_bind_host() -> str:
    """Retorna o host utilizado pelo Uvicorn para escutar conexões."""

    return os.getenv("PUBLISHMIND_API_BIND_HOST", _DEFAULT_API_BIND_HOST)


__all__ = [
    "ContentfulSettings",
    "Settings",
    "SiteSettings",
    "WebhookSettings",
    "get_api_bind_host",
    "get_api_port",
    "get_settings",
]
