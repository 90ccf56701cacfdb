"""Ponto de entrada REST que agrega os serviços do PublishMind."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from publishmind.services.automation import AutomationContainer, build_automation_container
from publishmind.services.automation.api import include_routes as include_automation_routes
from publishmind.services.catalog import CatalogContainer, build_catalog_container
from publishmind.services.catalog.api import (
    configure_cors,
    include_routes as include_catalog_routes,
)
from publishmind.settings import get_api_bind_host, get_api_port


def create_app(
    catalog: CatalogContainer | None = None,
    automation: AutomationContainer | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI com as rotas do site e dos webhooks."""

    catalog = catalog or build_catalog_container()
    automation = automation or build_automation_container(catalog.settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await catalog.aclose()
            await automation.aclose()

    app = FastAPI(
        lifespan=lifespan,
        title="PublishMind API",
        version="1.0.0",
        description=(
            "Leitura de publicações, categorias e etiquetas do Contentful, "
            "sitemap, robots e envio de conteúdo aos fluxos de automação."
        ),
    )
    configure_cors(app)
    include_catalog_routes(app, catalog)
    include_automation_routes(app, automation)
    return app


def run() -> None:
    """Executa a API agregada utilizando o Uvicorn."""

    load_dotenv()
    uvicorn.run(
        "publishmind.api:create_app",
        host=get_api_bind_host(),
        port=get_api_port(),
        factory=True,
    )


__all__ = ["create_app", "run"]
