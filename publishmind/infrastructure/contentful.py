"""Cliente HTTP assíncrono da Content Delivery API do Contentful."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping

import httpx

from publishmind.domain.errors import ContentStoreConfigurationError, ContentStoreError
from publishmind.domain.ports import ContentStore
from publishmind.query.filters import (
    EntryPage,
    EntryQuery,
    Equals,
    In,
    Matches,
    Predicate,
    expand_branches,
)
from publishmind.query.translator import MAX_FETCH_SIZE
from publishmind.settings import ContentfulSettings

DELIVERY_BASE_URL = "https://cdn.contentful.com"
PREVIEW_BASE_URL = "https://preview.contentful.com"

#: Janela usada quando uma consulta sem limite precisa ser dividida em ramos.
_DEFAULT_BRANCH_WINDOW = 100

EntityKey = tuple[str, str]


def serialize_predicate(predicate: Predicate) -> tuple[str, str]:
    """Converte um predicado simples no parâmetro de consulta do Contentful."""

    if isinstance(predicate, Equals):
        return predicate.path, predicate.value
    if isinstance(predicate, In):
        return f"{predicate.path}[in]", ",".join(predicate.values)
    if isinstance(predicate, Matches):
        return f"{predicate.path}[match]", predicate.text
    raise ValueError(f"predicate must be flattened before serialization: {predicate!r}")


def build_params(
    query: EntryQuery,
    branch: Iterable[Predicate],
    *,
    skip: int,
    limit: int | None,
) -> dict[str, Any]:
    """Monta os parâmetros de uma requisição ``/entries`` para um ramo."""

    params: dict[str, Any] = {"content_type": query.content_type}
    if query.order:
        params["order"] = query.order
    if limit is not None:
        params["limit"] = limit
    if skip:
        params["skip"] = skip
    if query.include is not None:
        params["include"] = query.include
    if query.select:
        params["select"] = ",".join(query.select)
    for predicate in branch:
        key, value = serialize_predicate(predicate)
        params[key] = value
    return params


def _entity_key(value: Mapping[str, Any]) -> EntityKey | None:
    sys = value.get("sys")
    if not isinstance(sys, Mapping):
        return None
    if sys.get("type") in ("Entry", "Asset") and sys.get("id"):
        return str(sys["type"]), str(sys["id"])
    return None


def _link_key(value: Mapping[str, Any]) -> EntityKey | None:
    sys = value.get("sys")
    if isinstance(sys, Mapping) and sys.get("type") == "Link" and sys.get("id"):
        return str(sys.get("linkType")), str(sys["id"])
    return None


def _resolve(value: Any, index: Mapping[EntityKey, Mapping[str, Any]], trail: tuple) -> Any:
    if isinstance(value, Mapping):
        link = _link_key(value)
        if link is not None:
            target = index.get(link)
            if target is None or link in trail:
                return value
            return _resolve(target, index, trail)
        own = _entity_key(value)
        if own is not None:
            trail = trail + (own,)
        return {
            key: item if key == "sys" else _resolve(item, index, trail)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_resolve(item, index, trail) for item in value]
    return value


def resolve_links(payload: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Substitui links pelas entradas e arquivos incluídos na resposta.

    Links sem correspondência em ``includes`` permanecem como estão;
    referências circulares são interrompidas no primeiro retorno.
    """

    items = payload.get("items") or []
    includes = payload.get("includes") or {}
    index: dict[EntityKey, Mapping[str, Any]] = {}
    for entity in [*items, *(includes.get("Entry") or ()), *(includes.get("Asset") or ())]:
        if isinstance(entity, Mapping):
            key = _entity_key(entity)
            if key is not None:
                index.setdefault(key, entity)
    return [_resolve(item, index, ()) for item in items if isinstance(item, Mapping)]


def _lookup(entry: Mapping[str, Any], path: str) -> Any:
    value: Any = entry
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def sort_entries(entries: list[dict[str, Any]], order: str) -> list[dict[str, Any]]:
    """Reaplica localmente a ordenação do Contentful (ex.: ``-sys.createdAt``)."""

    result = list(entries)
    for clause in reversed([part.strip() for part in order.split(",") if part.strip()]):
        descending = clause.startswith("-")
        path = clause.lstrip("-")
        result.sort(key=lambda entry: str(_lookup(entry, path) or ""), reverse=descending)
    return result


class ContentfulDeliveryClient(ContentStore):
    """Consulta entradas publicadas (ou rascunhos, no modo preview)."""

    def __init__(
        self,
        settings: ContentfulSettings,
        *,
        preview: bool = False,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        """Configura o cliente HTTP utilizado nas consultas.

        Parameters
        ----------
        settings:
            Credenciais do espaço Contentful.
        preview:
            Quando verdadeiro usa o token e o host da Preview API, incluindo
            rascunhos nos resultados.
        client:
            Cliente HTTP opcional reutilizado por outros componentes.
        base_url:
            Substitui o host padrão da API.
        """

        self._settings = settings
        self._preview = preview
        self._base_url = (base_url or (PREVIEW_BASE_URL if preview else DELIVERY_BASE_URL)).rstrip("/")
        """URL base normalizada sem barra final."""

        managed_client = client or httpx.AsyncClient(
            base_url=self._base_url, timeout=settings.timeout
        )
        self._client: httpx.AsyncClient = managed_client
        self._owns_client: bool = client is None
        self._log = logging.getLogger("publishmind.contentful")

    @property
    def preview(self) -> bool:
        return self._preview

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured(self._preview)

    async def get_entries(self, query: EntryQuery) -> EntryPage:
        self._ensure_configured()
        branches = expand_branches(query.predicates)
        if not branches:
            return EntryPage(skip=query.skip, limit=query.limit or 0)
        if len(branches) == 1:
            payload = await self._fetch(
                build_params(query, branches[0], skip=query.skip, limit=query.limit)
            )
            items = resolve_links(payload)
            return EntryPage(
                items=tuple(items),
                total=int(payload.get("total", len(items))),
                skip=int(payload.get("skip", query.skip)),
                limit=int(payload.get("limit", query.limit or len(items))),
            )
        return await self._get_merged(query, branches)

    async def _get_merged(
        self, query: EntryQuery, branches: list[tuple[Predicate, ...]]
    ) -> EntryPage:
        """Executa um ramo por requisição e une os resultados (semântica OR)."""

        limit = query.limit or _DEFAULT_BRANCH_WINDOW
        window = min(query.skip + limit, MAX_FETCH_SIZE)
        self._log.debug("consulta dividida em %d ramos", len(branches))
        payloads = await asyncio.gather(
            *(self._fetch(build_params(query, branch, skip=0, limit=window)) for branch in branches)
        )
        merged: dict[EntityKey, dict[str, Any]] = {}
        totals: list[int] = []
        for payload in payloads:
            totals.append(int(payload.get("total", 0)))
            for item in resolve_links(payload):
                key = _entity_key(item) or ("Entry", str(id(item)))
                merged.setdefault(key, item)
        items = list(merged.values())
        if query.order:
            items = sort_entries(items, query.order)
        return EntryPage(
            items=tuple(items[query.skip : query.skip + limit]),
            total=max([len(items), *totals]),
            skip=query.skip,
            limit=limit,
        )

    async def aclose(self) -> None:
        """Fecha o cliente HTTP caso esta instância seja a proprietária dele."""

        if self._owns_client:
            await self._client.aclose()

    def _ensure_configured(self) -> None:
        if self.is_configured:
            return
        token_var = "CONTENTFUL_PREVIEW_TOKEN" if self._preview else "CONTENTFUL_ACCESS_TOKEN"
        self._log.error(
            "Cliente Contentful indisponível: defina CONTENTFUL_SPACE_ID e %s", token_var
        )
        raise ContentStoreConfigurationError(
            f"Contentful client not configured - check CONTENTFUL_SPACE_ID and {token_var}"
        )

    async def _fetch(self, params: Mapping[str, Any]) -> dict[str, Any]:
        settings = self._settings
        path = f"/spaces/{settings.space_id}/environments/{settings.environment}/entries"
        headers = {"Authorization": f"Bearer {settings.token_for(self._preview)}"}
        self._log.debug("GET %s %s", path, dict(params))
        try:
            response = await self._client.get(path, params=dict(params), headers=headers)
        except httpx.HTTPError as exc:
            self._log.error("falha de conexão com o Contentful: %s", exc)
            raise ContentStoreError("Não foi possível conectar ao Contentful") from exc
        if response.is_error:
            self._log.error(
                "Contentful respondeu %s: %s", response.status_code, response.text[:500]
            )
            raise ContentStoreError(
                f"Contentful respondeu com status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ContentStoreError("Resposta inválida do Contentful") from exc
        if not isinstance(payload, dict):
            raise ContentStoreError("Resposta inválida do Contentful")
        return payload


__all__ = [
    "ContentfulDeliveryClient",
    "DELIVERY_BASE_URL",
    "PREVIEW_BASE_URL",
    "build_params",
    "resolve_links",
    "serialize_predicate",
    "sort_entries",
]
