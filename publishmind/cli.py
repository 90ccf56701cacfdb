"""Interface de linha de comando para operar o PublishMind."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Any

import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from publishmind.domain.entities.rich_text import plain_text
from publishmind.domain.errors import PublishMindError
from publishmind.query import MAX_FETCH_SIZE, PublicationRequest
from publishmind.services.catalog import CatalogContainer, build_catalog_container
from publishmind.settings import get_api_bind_host, get_api_port
from publishmind.tags import rank_tags


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PublishMind - site de conteúdo dinâmico")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Inicia a API HTTP com o Uvicorn")
    serve.add_argument("--host", default=None, help="Host de escuta (padrão: PUBLISHMIND_API_BIND_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Porta (padrão: PUBLISHMIND_API_PORT)")

    search = subparsers.add_parser("search", help="Busca publicações por texto livre")
    search.add_argument("query", help="Texto pesquisado")
    search.add_argument("--limit", type=int, default=10, help="Quantidade máxima de resultados")

    tags = subparsers.add_parser("tags", help="Lista as etiquetas utilizadas nas publicações")
    tags.add_argument(
        "--top",
        type=int,
        default=None,
        help="Exibe apenas as N etiquetas mais frequentes, com as contagens",
    )

    show = subparsers.add_parser("show", help="Exibe uma publicação pelo slug")
    show.add_argument("slug", help="Slug da publicação")
    show.add_argument("--html", action="store_true", help="Exibe o corpo renderizado em HTML")
    show.add_argument(
        "--preview", action="store_true", help="Consulta rascunhos com o token de preview"
    )

    sitemap = subparsers.add_parser("sitemap", help="Gera o sitemap XML do site")
    sitemap.add_argument(
        "--output", type=Path, default=None, help="Arquivo de saída (padrão: stdout)"
    )

    for sp in (serve, search, tags, show, sitemap):
        sp.add_argument(
            "--log-level",
            default=None,
            help="Nível de log: DEBUG, INFO, WARNING, ERROR (padrão INFO)",
        )

    return parser.parse_args(argv)


async def _search(container: CatalogContainer, console: Console, args: argparse.Namespace) -> None:
    page = await container.repository.search(args.query, limit=args.limit)
    if not page.items:
        console.print("[yellow]Nenhuma publicação encontrada.[/yellow]")
        return
    console.print(f"[bold]{page.total}[/bold] resultado(s) para '{args.query}':")
    for publication in page.items:
        category = publication.category.name if publication.category else "-"
        console.print(f"[bold]-[/bold] {publication.title} [dim]({publication.slug}, {category})[/dim]")


async def _tags(container: CatalogContainer, console: Console, args: argparse.Namespace) -> None:
    if args.top is None:
        for tag in await container.page_service.tags():
            console.print(tag)
        return
    page = await container.repository.list_publications(PublicationRequest(limit=MAX_FETCH_SIZE))
    for item in rank_tags(page.items, args.top):
        console.print(f"{item.tag} [dim]{item.count}[/dim]")


async def _show(container: CatalogContainer, console: Console, args: argparse.Namespace) -> None:
    view = await container.page_service.publication(args.slug, preview=args.preview)
    if view is None:
        console.print(f"[red]Publicação '{args.slug}' não encontrada.[/red]")
        return
    publication = view.publication
    data: dict[str, Any] = {
        "titulo": publication.title,
        "slug": publication.slug,
        "autor": publication.author,
        "categoria": publication.category.slug if publication.category else None,
        "tags": list(publication.tags),
        "descricao": view.metadata.description,
        "relacionadas": [item.slug for item in view.related],
    }
    console.print_json(data=data)
    if args.html:
        console.print(view.html, markup=False, highlight=False)
    else:
        console.print(plain_text(publication.body), markup=False, highlight=False)


async def _sitemap(container: CatalogContainer, console: Console, args: argparse.Namespace) -> None:
    xml = await container.page_service.sitemap()
    if args.output is None:
        console.print(xml, markup=False, highlight=False)
        return
    args.output.write_text(xml, encoding="utf-8")
    console.print(f"[green]Sitemap salvo em {args.output}.[/green]")


_COMMANDS = {
    "search": _search,
    "tags": _tags,
    "show": _show,
    "sitemap": _sitemap,
}


async def _run_command(container: CatalogContainer, console: Console, args: argparse.Namespace) -> None:
    try:
        await _COMMANDS[args.command](container, console, args)
    finally:
        await container.aclose()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    console = Console()
    level_name = getattr(args, "log_level", None) or os.getenv("PUBLISHMIND_LOG_LEVEL", "INFO")
    handler = RichHandler(console=console, markup=True, rich_tracebacks=True)
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    logger = logging.getLogger("publishmind.cli")

    if args.command == "serve":
        logger.info("Iniciando a API do PublishMind")
        uvicorn.run(
            "publishmind.api:create_app",
            host=args.host or get_api_bind_host(),
            port=args.port or get_api_port(),
            factory=True,
        )
        return 0

    container = build_catalog_container()
    try:
        asyncio.run(_run_command(container, console, args))
    except PublishMindError as exc:
        console.print(f"[red]{exc}[/red]")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
