"""Adaptadores para os serviços externos usados pelo site."""
from .contentful import ContentfulDeliveryClient
from .webhooks import AutomationWebhookClient

__all__ = ["AutomationWebhookClient", "ContentfulDeliveryClient"]
