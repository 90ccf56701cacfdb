"""Cliente HTTP dos webhooks de automação (n8n) de criação de conteúdo."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from publishmind.domain.entities import GenerationRequest, PublicationSubmission
from publishmind.domain.errors import WebhookConfigurationError, WebhookError
from publishmind.domain.ports import AutomationGateway
from publishmind.settings import ContentfulSettings, WebhookSettings


class AutomationWebhookClient(AutomationGateway):
    """Repassa envios manuais e pedidos de geração ao serviço de automação."""

    def __init__(
        self,
        settings: WebhookSettings,
        *,
        contentful: ContentfulSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Configura as URLs e o cliente HTTP utilizado nos envios.

        Parameters
        ----------
        settings:
            URLs dos fluxos manual e automático.
        contentful:
            Credenciais repassadas ao fluxo para que ele publique no espaço.
        client:
            Cliente HTTP opcional reutilizado por outros componentes.
        """

        self._settings = settings
        self._contentful = contentful or ContentfulSettings()
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=settings.timeout)
        self._owns_client: bool = client is None
        self._log = logging.getLogger("publishmind.webhooks")

    async def submit_publication(self, submission: PublicationSubmission) -> dict[str, Any]:
        """Envia a publicação como formulário multipart."""

        return await self._post(
            self._settings.manual_url,
            files=self._submission_parts(submission),
        )

    async def generate_content(self, request: GenerationRequest) -> dict[str, Any]:
        """Envia a ideia em JSON junto com as credenciais do espaço."""

        self._log.info("Solicitando geração de conteúdo (categoria=%s)", request.category)
        return await self._post(
            self._settings.auto_url,
            json={
                "prompt": request.prompt,
                "category": request.category,
                "contentfulSpaceId": self._contentful.space_id,
                "contentfulAccessToken": self._contentful.access_token,
            },
        )

    async def aclose(self) -> None:
        """Fecha o cliente HTTP caso esta instância seja a proprietária dele."""

        if self._owns_client:
            await self._client.aclose()

    def _submission_parts(self, submission: PublicationSubmission) -> list[tuple[str, Any]]:
        fields: dict[str, str | None] = {
            "titulo": submission.title,
            "contenido": submission.body,
            "categoria": submission.category,
            "autor": submission.author,
            "tags": ",".join(submission.tags) if submission.tags else None,
            "slug": submission.slug,
            "fechaPublicacion": submission.published_at,
            "contentfulSpaceId": self._contentful.space_id,
            "contentfulAccessToken": self._contentful.access_token,
        }
        # Campos sem nome de arquivo são enviados como campos comuns do formulário.
        parts: list[tuple[str, Any]] = [
            (name, (None, value.encode("utf-8")))
            for name, value in fields.items()
            if value is not None
        ]
        if submission.image is not None:
            image = submission.image
            parts.append(("imagen", (image.filename, image.content, image.content_type)))
        return parts

    async def _post(self, url: str | None, **kwargs: Any) -> dict[str, Any]:
        if not url:
            self._log.error("URL do webhook de automação não configurada")
            raise WebhookConfigurationError("Webhook URL no configurada")
        self._log.debug("POST %s", url)
        try:
            response = await self._client.post(url, **kwargs)
        except httpx.HTTPError as exc:
            self._log.error("falha de conexão com o webhook %s: %s", url, exc)
            raise WebhookError(f"No se pudo conectar con el webhook: {exc}") from exc

        self._log.info("Status do webhook: %s", response.status_code)
        if response.is_error:
            body = response.text
            self._log.error("Erro do webhook (%s): %s", response.status_code, body)
            raise WebhookError(
                f"Error del webhook: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=body,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise WebhookError("Respuesta inválida del webhook") from exc
        if not isinstance(data, dict):
            return {"data": data}
        return data


__all__ = ["AutomationWebhookClient"]
