"""Portas que conectam o domínio a serviços externos."""
from .automation_gateway import AutomationGateway
from .content_store import ContentStore

__all__ = ["AutomationGateway", "ContentStore"]
