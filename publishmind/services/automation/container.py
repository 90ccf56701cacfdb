"""Dependency container for the content automation proxies."""
from __future__ import annotations

from dataclasses import dataclass

from publishmind.domain.ports import AutomationGateway
from publishmind.infrastructure import AutomationWebhookClient
from publishmind.settings import Settings, get_settings


@dataclass
class AutomationContainer:
    """Container exposing the automation gateway."""

    gateway: AutomationGateway

    async def aclose(self) -> None:
        await self.gateway.aclose()


def build_automation_container(
    settings: Settings | None = None,
    *,
    gateway: AutomationGateway | None = None,
) -> AutomationContainer:
    """Build the automation service container."""

    settings = settings or get_settings()
    gateway = gateway or AutomationWebhookClient(
        settings.webhooks, contentful=settings.contentful
    )
    return AutomationContainer(gateway=gateway)
