"""Renderização de documentos ricos em fragmentos HTML."""
from __future__ import annotations

import html
import logging
from typing import Any, Callable, Iterator
from urllib.parse import urlsplit

from publishmind.domain.entities.rich_text import (
    Container,
    Document,
    EmbeddedAsset,
    Heading,
    Hyperlink,
    Mark,
    Node,
    NodeKind,
    Text,
    UnknownNode,
)

_MARK_TEMPLATES: dict[Mark, str] = {
    Mark.BOLD: '<strong class="font-bold">{}</strong>',
    Mark.ITALIC: '<em class="italic">{}</em>',
    Mark.UNDERLINE: '<u class="underline">{}</u>',
    Mark.CODE: '<code class="rounded bg-muted px-1 py-0.5 font-mono text-sm">{}</code>',
}

_HEADING_CLASSES = {
    1: "mb-6 mt-10 text-4xl font-bold tracking-tight",
    2: "mb-4 mt-8 text-3xl font-bold tracking-tight",
    3: "mb-4 mt-6 text-2xl font-bold tracking-tight",
    4: "mb-4 mt-6 text-xl font-semibold tracking-tight",
    5: "mb-4 mt-4 text-lg font-semibold tracking-tight",
    6: "mb-4 mt-4 text-base font-semibold tracking-tight",
}

_BLOCK_TAGS: dict[NodeKind, tuple[str, str]] = {
    NodeKind.PARAGRAPH: ("p", "mb-4 leading-relaxed"),
    NodeKind.UNORDERED_LIST: ("ul", "mb-6 ml-6 list-disc space-y-2"),
    NodeKind.ORDERED_LIST: ("ol", "mb-6 ml-6 list-decimal space-y-2"),
    NodeKind.LIST_ITEM: ("li", "leading-relaxed"),
    NodeKind.BLOCKQUOTE: ("blockquote", "border-l-4 border-primary pl-4 italic"),
}

_LINK_CLASS = "text-primary underline transition-colors hover:text-primary/80"

#: Esquemas aceitos em links; URIs sem esquema são relativas ao site.
SAFE_LINK_SCHEMES = frozenset({"http", "https", "mailto"})

Handler = Callable[[Any], Iterator[str]]


def _attr(value: object) -> str:
    return html.escape(str(value), quote=True)


def is_safe_link(uri: str) -> bool:
    try:
        scheme = urlsplit(uri.strip()).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in SAFE_LINK_SCHEMES


class RenderedDocument:
    """Percurso preguiçoso de um documento.

    Cada iteração percorre a árvore novamente, portanto o objeto pode ser
    consumido mais de uma vez.
    """

    def __init__(self, renderer: "RichTextRenderer", document: Document) -> None:
        self._renderer = renderer
        self._document = document

    def __iter__(self) -> Iterator[str]:
        return self._renderer.iter_fragments(self._document)

    def __str__(self) -> str:
        return "".join(self)


class RichTextRenderer:
    """Converte cada tipo de nó em marcação HTML.

    Nós desconhecidos não produzem saída. Falhas ao renderizar um nó são
    registradas e o nó é omitido sem interromper os irmãos.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger("publishmind.renderer")
        self._handlers: dict[NodeKind, Handler] = {
            NodeKind.DOCUMENT: self._render_children,
            NodeKind.PARAGRAPH: self._render_block,
            NodeKind.UNORDERED_LIST: self._render_block,
            NodeKind.ORDERED_LIST: self._render_block,
            NodeKind.LIST_ITEM: self._render_block,
            NodeKind.BLOCKQUOTE: self._render_block,
            NodeKind.HEADING: self._render_heading,
            NodeKind.HORIZONTAL_RULE: self._render_rule,
            NodeKind.EMBEDDED_ASSET: self._render_asset,
            NodeKind.HYPERLINK: self._render_hyperlink,
            NodeKind.TEXT: self._render_text,
        }

    def render(self, document: Document) -> RenderedDocument:
        return RenderedDocument(self, document)

    def render_html(self, document: Document) -> str:
        return str(self.render(document))

    def iter_fragments(self, node: Node) -> Iterator[str]:
        handler = self._handlers.get(node.kind)
        if handler is None:
            if isinstance(node, UnknownNode):
                self._log.debug("nó desconhecido ignorado: %s", node.node_type or "?")
            return iter(())
        return handler(node)

    def _render_children(self, node: Node) -> Iterator[str]:
        if not isinstance(node, Container):
            return
        for child in node.content:
            try:
                fragments = list(self.iter_fragments(child))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                self._log.warning("falha ao renderizar nó %s: %s", child.kind.value, exc)
                continue
            yield from fragments

    def _render_block(self, node: Node) -> Iterator[str]:
        tag, css = _BLOCK_TAGS[node.kind]
        yield f'<{tag} class="{css}">'
        yield from self._render_children(node)
        yield f"</{tag}>"

    def _render_heading(self, node: Heading) -> Iterator[str]:
        level = node.level if node.level in _HEADING_CLASSES else 6
        yield f'<h{level} class="{_HEADING_CLASSES[level]}">'
        yield from self._render_children(node)
        yield f"</h{level}>"

    def _render_rule(self, node: Node) -> Iterator[str]:
        yield '<hr class="my-8 border-t border-border" />'

    def _render_asset(self, node: EmbeddedAsset) -> Iterator[str]:
        asset = node.asset
        if asset is None or not asset.is_image:
            return
        alt = asset.description or asset.title or "Imagen"
        attributes = [f'src="{_attr(asset.absolute_url)}"', f'alt="{_attr(alt)}"']
        if asset.width and asset.height:
            attributes.append(f'width="{asset.width}"')
            attributes.append(f'height="{asset.height}"')
        attributes.append('loading="lazy"')
        attributes.append('class="h-auto w-full object-cover"')
        yield '<figure class="my-8"><div class="overflow-hidden rounded-lg">'
        yield f"<img {' '.join(attributes)} />"
        yield "</div>"
        if asset.description:
            yield (
                '<figcaption class="mt-2 text-center text-sm text-muted-foreground">'
                f"{html.escape(asset.description)}</figcaption>"
            )
        yield "</figure>"

    def _render_hyperlink(self, node: Hyperlink) -> Iterator[str]:
        if not is_safe_link(node.uri):
            self._log.warning("link com esquema não permitido ignorado: %r", node.uri)
            yield from self._render_children(node)
            return
        attributes = f'href="{_attr(node.uri)}" class="{_LINK_CLASS}"'
        if node.is_external:
            attributes += ' target="_blank" rel="noopener noreferrer"'
        yield f"<a {attributes}>"
        yield from self._render_children(node)
        yield "</a>"

    def _render_text(self, node: Text) -> Iterator[str]:
        markup = html.escape(node.value, quote=False)
        for mark in node.marks:
            markup = _MARK_TEMPLATES[mark].format(markup)
        yield markup


def render_html(document: Document) -> str:
    return RichTextRenderer().render_html(document)


__all__ = ["RenderedDocument", "RichTextRenderer", "is_safe_link", "render_html"]
