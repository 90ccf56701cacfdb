import logging

from bs4 import BeautifulSoup

from publishmind.domain.entities.rich_text import (
    Document,
    HorizontalRule,
    Node,
    NodeKind,
    Paragraph,
    Text,
    UnknownNode,
    parse_document,
    plain_text,
)
from publishmind.domain import Publication
from publishmind.rendering import RichTextRenderer, render_html
from publishmind.seo import DESCRIPTION_MAX_LENGTH, SiteMetadataGenerator, truncate_description
from publishmind.settings import SiteSettings


def _text(value, *marks):
    return {"nodeType": "text", "value": value, "marks": [{"type": m} for m in marks], "data": {}}


def _node(node_type, *content, **data):
    return {"nodeType": node_type, "data": data, "content": list(content)}


def _image_asset(content_type="image/png", description="Un gato"):
    return {
        "sys": {"id": "asset-1", "type": "Asset"},
        "fields": {
            "title": "Gato",
            "description": description,
            "file": {
                "url": "//images.ctfassets.net/gato.png",
                "contentType": content_type,
                "details": {"image": {"width": 800, "height": 600}},
            },
        },
    }


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def test_paragraph_text_is_escaped():
    document = parse_document(_node("document", _node("paragraph", _text("<b>1 & 2</b>"))))

    html = render_html(document)

    assert "&lt;b&gt;1 &amp; 2&lt;/b&gt;" in html
    assert _soup(html).p.get_text() == "<b>1 & 2</b>"


def test_marks_nest_in_declared_order():
    document = parse_document(
        _node("document", _node("paragraph", _text("hola", "bold", "italic")))
    )

    paragraph = _soup(render_html(document)).p

    assert paragraph.em is not None
    assert paragraph.em.strong is not None
    assert paragraph.em.strong.get_text() == "hola"


def test_headings_lists_and_quotes():
    document = parse_document(
        _node(
            "document",
            _node("heading-2", _text("Título")),
            _node(
                "unordered-list",
                _node("list-item", _node("paragraph", _text("uno"))),
                _node("list-item", _node("paragraph", _text("dos"))),
            ),
            _node("ordered-list", _node("list-item", _node("paragraph", _text("primero")))),
            _node("blockquote", _node("paragraph", _text("cita"))),
            {"nodeType": "hr", "data": {}, "content": []},
        )
    )

    soup = _soup(render_html(document))

    assert soup.h2.get_text() == "Título"
    assert [li.get_text() for li in soup.ul.find_all("li")] == ["uno", "dos"]
    assert soup.ol.li.get_text() == "primero"
    assert soup.blockquote.get_text() == "cita"
    assert soup.hr is not None


def test_image_asset_renders_figure_with_dimensions():
    document = parse_document(
        _node("document", _node("embedded-asset-block", target=_image_asset()))
    )

    soup = _soup(render_html(document))

    image = soup.figure.img
    assert image["src"] == "https://images.ctfassets.net/gato.png"
    assert image["width"] == "800"
    assert image["height"] == "600"
    assert image["alt"] == "Un gato"
    assert soup.figcaption.get_text() == "Un gato"


def test_non_image_or_unresolved_assets_render_nothing():
    document = parse_document(
        _node(
            "document",
            _node("embedded-asset-block", target=_image_asset(content_type="application/pdf")),
            _node("embedded-asset-block", target={"sys": {"type": "Link", "id": "x"}}),
        )
    )

    assert render_html(document) == ""


def test_hyperlinks_distinguish_internal_and_external():
    document = parse_document(
        _node(
            "document",
            _node(
                "paragraph",
                _node("hyperlink", _text("interno"), uri="/categoria/salud"),
                _node("hyperlink", _text("externo"), uri="https://example.com"),
            ),
        )
    )

    internal, external = _soup(render_html(document)).find_all("a")

    assert internal["href"] == "/categoria/salud"
    assert internal.get("target") is None
    assert external["target"] == "_blank"
    assert external["rel"] == ["noopener", "noreferrer"]


def test_unknown_nodes_are_skipped_and_siblings_render():
    document = parse_document(
        _node(
            "document",
            _node("embedded-entry-block"),
            "basura",
            _node("paragraph", _text("sigue")),
        )
    )

    assert isinstance(document.content[0], UnknownNode)
    assert render_html(document) == '<p class="mb-4 leading-relaxed">sigue</p>'


def test_failing_node_is_logged_and_skipped(caplog):
    class Broken(Node):
        kind = NodeKind.HEADING

    document = Document(content=(Broken(), Paragraph(content=(Text(value="ok"),))))

    with caplog.at_level(logging.WARNING, logger="publishmind.renderer"):
        html = RichTextRenderer().render_html(document)

    assert html == '<p class="mb-4 leading-relaxed">ok</p>'
    assert "falha ao renderizar" in caplog.text


def test_rendered_document_can_be_iterated_twice():
    document = Document(content=(Paragraph(content=(Text(value="a"),)), HorizontalRule()))

    rendered = RichTextRenderer().render(document)

    assert list(rendered) == list(rendered)
    assert str(rendered) == "".join(rendered)


def test_invalid_payload_parses_to_empty_document():
    assert parse_document(None) == Document()
    assert parse_document({"nodeType": "paragraph"}).content != ()
    assert render_html(parse_document("texto")) == ""


def test_plain_text_concatenates_runs():
    document = parse_document(
        _node("document", _node("paragraph", _text("Hola "), _text("mundo", "bold")))
    )

    assert plain_text(document) == "Hola mundo"


def test_unsafe_link_schemes_render_only_their_text(caplog):
    document = parse_document(
        _node(
            "document",
            _node(
                "paragraph",
                _node("hyperlink", _text("clic"), uri="javascript:alert(1)"),
                _node("hyperlink", _text("datos"), uri=" DATA:text/html,x"),
                _node("hyperlink", _text("correo"), uri="mailto:hola@example.com"),
            ),
        )
    )

    with caplog.at_level(logging.WARNING, logger="publishmind.renderer"):
        paragraph = _soup(render_html(document)).p

    (link,) = paragraph.find_all("a")
    assert link["href"] == "mailto:hola@example.com"
    assert paragraph.get_text() == "clicdatoscorreo"
    assert "javascript" not in str(paragraph)
    assert "javascript:alert(1)" in caplog.text


def test_first_rendered_paragraph_matches_description():
    long_run = "Las bibliotecas de interfaces cambian rápido & conviene medir " * 4
    document = parse_document(
        _node(
            "document",
            _node("heading-2", _text("Título")),
            _node(
                "paragraph",
                _text("React", "bold", "italic"),
                _text(" es "),
                _node("hyperlink", _text("una biblioteca"), uri="https://react.dev"),
                _text(". "),
                _text(long_run, "code"),
            ),
            _node("paragraph", _text("Segundo párrafo.")),
        )
    )
    publication = Publication(id="pub-1", title="React", slug="react", body=document)
    describe = SiteMetadataGenerator(SiteSettings()).describe

    rendered_text = _soup(render_html(document)).find("p").get_text().strip()
    description = describe(publication)

    assert len(rendered_text) > DESCRIPTION_MAX_LENGTH
    assert description == truncate_description(rendered_text)
    assert len(description) == DESCRIPTION_MAX_LENGTH
    assert description.endswith("...")
    assert description.startswith("React es una biblioteca. Las bibliotecas")
