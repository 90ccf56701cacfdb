"""Árvore de documento rico usada no corpo das publicações.

Cada nó é uma variante imutável identificada por :class:`NodeKind`. O
conjunto de variantes é fechado: qualquer nó desconhecido ou malformado vira
:class:`UnknownNode`, que não produz saída na renderização.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterable, Iterator, Mapping, Optional

from .asset import Asset


class NodeKind(str, Enum):
    """Discriminador das variantes de nó."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    UNORDERED_LIST = "unordered-list"
    ORDERED_LIST = "ordered-list"
    LIST_ITEM = "list-item"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "hr"
    EMBEDDED_ASSET = "embedded-asset-block"
    HYPERLINK = "hyperlink"
    TEXT = "text"
    UNKNOWN = "unknown"


class Mark(str, Enum):
    """Formatações aplicáveis a um trecho de texto."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"


@dataclass(frozen=True)
class Node:
    kind: ClassVar[NodeKind] = NodeKind.UNKNOWN


@dataclass(frozen=True)
class Text(Node):
    kind: ClassVar[NodeKind] = NodeKind.TEXT

    value: str = ""
    marks: tuple[Mark, ...] = ()


@dataclass(frozen=True)
class Container(Node):
    """Nó que agrupa filhos."""

    content: tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Document(Container):
    kind: ClassVar[NodeKind] = NodeKind.DOCUMENT


@dataclass(frozen=True)
class Paragraph(Container):
    kind: ClassVar[NodeKind] = NodeKind.PARAGRAPH


@dataclass(frozen=True)
class Heading(Container):
    kind: ClassVar[NodeKind] = NodeKind.HEADING

    level: int = 1


@dataclass(frozen=True)
class UnorderedList(Container):
    kind: ClassVar[NodeKind] = NodeKind.UNORDERED_LIST


@dataclass(frozen=True)
class OrderedList(Container):
    kind: ClassVar[NodeKind] = NodeKind.ORDERED_LIST


@dataclass(frozen=True)
class ListItem(Container):
    kind: ClassVar[NodeKind] = NodeKind.LIST_ITEM


@dataclass(frozen=True)
class Blockquote(Container):
    kind: ClassVar[NodeKind] = NodeKind.BLOCKQUOTE


@dataclass(frozen=True)
class HorizontalRule(Node):
    kind: ClassVar[NodeKind] = NodeKind.HORIZONTAL_RULE


@dataclass(frozen=True)
class EmbeddedAsset(Node):
    kind: ClassVar[NodeKind] = NodeKind.EMBEDDED_ASSET

    #: ``None`` quando o link do arquivo não pôde ser resolvido.
    asset: Optional[Asset] = None


@dataclass(frozen=True)
class Hyperlink(Container):
    kind: ClassVar[NodeKind] = NodeKind.HYPERLINK

    uri: str = ""

    @property
    def is_external(self) -> bool:
        return not self.uri.startswith("/")


@dataclass(frozen=True)
class UnknownNode(Node):
    kind: ClassVar[NodeKind] = NodeKind.UNKNOWN

    #: Tipo informado pela origem, preservado para diagnóstico.
    node_type: str = ""


_HEADING_RE = re.compile(r"^heading-([1-6])$")

_CONTAINERS: dict[str, type[Container]] = {
    "document": Document,
    "paragraph": Paragraph,
    "unordered-list": UnorderedList,
    "ordered-list": OrderedList,
    "list-item": ListItem,
    "blockquote": Blockquote,
}


def parse_document(data: Any) -> Document:
    """Converte o JSON de rich text do Contentful em um :class:`Document`.

    Payloads ausentes ou inválidos resultam em um documento vazio.
    """

    node = parse_node(data)
    if isinstance(node, Document):
        return node
    if isinstance(node, UnknownNode):
        return Document()
    return Document(content=(node,))


def parse_node(data: Any) -> Node:
    """Converte um nó bruto na variante correspondente."""

    if not isinstance(data, Mapping):
        return UnknownNode(node_type=type(data).__name__)
    node_type = data.get("nodeType")
    if not isinstance(node_type, str):
        return UnknownNode(node_type=str(node_type))

    if node_type == "text":
        value = data.get("value")
        if not isinstance(value, str):
            return UnknownNode(node_type=node_type)
        return Text(value=value, marks=_parse_marks(data.get("marks")))

    if node_type == "hr":
        return HorizontalRule()

    node_data = data.get("data") if isinstance(data.get("data"), Mapping) else {}

    if node_type == "embedded-asset-block":
        return EmbeddedAsset(asset=Asset.from_entry(node_data.get("target")))

    children = _parse_children(data.get("content"))

    if node_type == "hyperlink":
        uri = node_data.get("uri")
        if not isinstance(uri, str) or not uri:
            return UnknownNode(node_type=node_type)
        return Hyperlink(content=children, uri=uri)

    heading = _HEADING_RE.match(node_type)
    if heading:
        return Heading(content=children, level=int(heading.group(1)))

    container = _CONTAINERS.get(node_type)
    if container is None:
        return UnknownNode(node_type=node_type)
    return container(content=children)


def _parse_children(raw: Any) -> tuple[Node, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(parse_node(item) for item in raw)


def _parse_marks(raw: Any) -> tuple[Mark, ...]:
    marks: list[Mark] = []
    for item in raw or ():
        mark_type = item.get("type") if isinstance(item, Mapping) else item
        try:
            mark = Mark(mark_type)
        except ValueError:
            continue
        if mark not in marks:
            marks.append(mark)
    return tuple(marks)


def iter_text_runs(node: Node) -> Iterator[str]:
    """Percorre em profundidade os valores de texto de um nó."""

    if isinstance(node, Text):
        yield node.value
    elif isinstance(node, Container):
        for child in node.content:
            yield from iter_text_runs(child)


def plain_text(node: Node) -> str:
    """Concatena todos os trechos de texto do nó."""

    return "".join(iter_text_runs(node))


def first_paragraph_text(document: Document) -> Optional[str]:
    """Texto do primeiro parágrafo de nível superior com conteúdo."""

    return next(paragraph_texts(document.content), None)


def paragraph_texts(nodes: Iterable[Node]) -> Iterator[str]:
    for node in nodes:
        if isinstance(node, Paragraph):
            text = plain_text(node).strip()
            if text:
                yield text


__all__ = [
    "Blockquote",
    "Container",
    "Document",
    "EmbeddedAsset",
    "Heading",
    "HorizontalRule",
    "Hyperlink",
    "ListItem",
    "Mark",
    "Node",
    "NodeKind",
    "OrderedList",
    "Paragraph",
    "Text",
    "UnknownNode",
    "UnorderedList",
    "first_paragraph_text",
    "iter_text_runs",
    "paragraph_texts",
    "parse_document",
    "parse_node",
    "plain_text",
]
