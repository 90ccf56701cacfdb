"""Renderização do corpo das publicações."""
from .rich_text import RenderedDocument, RichTextRenderer, render_html

__all__ = ["RenderedDocument", "RichTextRenderer", "render_html"]
