"""Rotas que repassam a criação de conteúdo aos webhooks de automação."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from publishmind.domain import GenerationRequest, PublicationSubmission, UploadedImage
from publishmind.domain.errors import PublishMindError
from publishmind.services.automation import AutomationContainer

_log = logging.getLogger("publishmind.webhooks")


class GenerateContentPayload(BaseModel):
    """Ideia enviada para o fluxo de geração automática."""

    #: Descrição livre do conteúdo desejado.
    prompt: str
    #: Categoria sugerida para a publicação gerada.
    category: str | None = None

    def to_domain(self) -> GenerationRequest:
        return GenerationRequest(prompt=self.prompt, category=self.category)


def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


def include_routes(app: FastAPI, container: AutomationContainer, *, prefix: str = "") -> None:
    """Registra as rotas de envio manual e geração automática."""

    router = APIRouter(prefix=prefix, tags=["Automação"])

    @router.post("/api/submit-publication")
    async def submit_publication(
        titulo: str = Form(...),
        contenido: str = Form(...),
        categoria: str = Form(...),
        autor: Optional[str] = Form(None),
        tags: Optional[str] = Form(None),
        slug: Optional[str] = Form(None),
        fechaPublicacion: Optional[str] = Form(None),
        imagen: Optional[UploadFile] = File(None),
    ) -> Any:
        """Encaminha o formulário de publicação manual ao webhook."""

        image = None
        if imagen is not None and imagen.filename:
            image = UploadedImage(
                filename=imagen.filename,
                content=await imagen.read(),
                content_type=imagen.content_type or "application/octet-stream",
            )
        submission = PublicationSubmission(
            title=titulo,
            body=contenido,
            category=categoria,
            author=autor or None,
            tags=PublicationSubmission.split_tags(tags),
            slug=slug or None,
            published_at=fechaPublicacion or datetime.now(timezone.utc).isoformat(),
            image=image,
        )
        try:
            return await container.gateway.submit_publication(submission)
        except PublishMindError as exc:
            _log.error("erro ao enviar publicação manual: %s", exc)
            return _error_response(exc)

    @router.post("/api/generate-content")
    async def generate_content(payload: GenerateContentPayload) -> Any:
        """Encaminha a ideia ao webhook de geração automática."""

        try:
            return await container.gateway.generate_content(payload.to_domain())
        except PublishMindError as exc:
            _log.error("erro em generate-content: %s", exc)
            return _error_response(exc)

    app.include_router(router)


__all__ = ["GenerateContentPayload", "include_routes"]
