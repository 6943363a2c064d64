"""Build the initial structured document tree from markdown or plain text"""

from html import escape as html_escape
from typing import Optional

from mdcrdt.core.models import DocNode
from mdcrdt.core.parse import MarkdownEngine
from mdcrdt.core.patch import EMPTY_PARAGRAPH, preserve_blank_lines
from mdcrdt.core.schema import DocumentSchema, PlainTextSchema, RichTextSchema


def initial_html(content: str, is_rich_editor: bool, renderer: Optional[MarkdownEngine] = None) -> str:
    """Return the HTML fed to the editor schema for content.

    Rich mode needs a renderer; plain mode ignores it.
    """
    if not is_rich_editor:
        return f'<pre>{html_escape(content)}</pre>'
    if renderer is None:
        raise ValueError("Rich mode requires a markdown renderer")
    html = renderer.render(content) + EMPTY_PARAGRAPH
    return preserve_blank_lines(content, html, renderer)


def build_document(
    content: str,
    is_rich_editor: bool,
    renderer: Optional[MarkdownEngine] = None,
    schema: Optional[DocumentSchema] = None,
    ) -> DocNode:
    """Convert content into the editor's document tree.

    Rich mode renders markdown, restores blank-line runs, and parses the HTML
    with the rich schema. Plain mode keeps content verbatim in one code block.
    Renderer and schema errors are not caught.
    """
    if schema is None:
        schema = RichTextSchema() if is_rich_editor else PlainTextSchema()
    return schema.from_html(initial_html(content, is_rich_editor, renderer))
