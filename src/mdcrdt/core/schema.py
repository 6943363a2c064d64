"""HTML to structured document tree conversion (rich and plain editor schemas)"""

import re
from typing import Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from mdcrdt.core.models import DocNode, Mark


WHITESPACE_RE = re.compile(r'[ \t\r\n\f]+')

HEADING_TAGS = {f'h{n}': n for n in range(1, 7)}

MARK_TAGS: dict[str, str] = {
    'strong': 'bold',
    'b':      'bold',
    'em':     'italic',
    'i':      'italic',
    's':      'strike',
    'del':    'strike',
    'strike': 'strike',
    'code':   'code',
}

# Marks on a text node are kept in this order so equal formatting compares equal.
MARK_RANK = {'link': 0, 'bold': 1, 'italic': 2, 'strike': 3, 'code': 4}

BLOCK_TAGS = {
    'p', 'ul', 'ol', 'li', 'blockquote', 'pre', 'hr', 'table', 'div',
    'section', 'article', 'header', 'footer', 'figure', *HEADING_TAGS,
}
IGNORED_TAGS = {'script', 'style', 'head', 'title', 'meta', 'link'}
TABLE_SECTIONS = {'thead', 'tbody', 'tfoot'}


class DocumentSchema(Protocol):
    def from_html(self, html: str) -> DocNode: ...


def _paragraph(content: Optional[list[DocNode]] = None) -> DocNode:
    return DocNode(type='paragraph', content=content or [])


def _int_attr(tag: Tag, name: str, default: int) -> int:
    try:
        return int(tag.get(name, default))
    except (TypeError, ValueError):
        return default


class _InlineBuffer:
    """Collects inline nodes for one textblock, collapsing whitespace like a DOM parser."""

    def __init__(self):
        self.nodes: list[DocNode] = []

    def _at_boundary(self) -> bool:
        if not self.nodes:
            return True
        last = self.nodes[-1]
        return last.type == 'hardBreak' or (last.type == 'text' and last.text.endswith(' '))

    def add_text(self, value: str, marks: list[Mark]) -> None:
        value = WHITESPACE_RE.sub(' ', value)
        if value.startswith(' ') and self._at_boundary():
            value = value[1:]
        if value:
            self.nodes.append(DocNode(type='text', text=value, marks=list(marks)))

    def add_node(self, node: DocNode) -> None:
        self.nodes.append(node)

    def take(self) -> list[DocNode]:
        """Return the buffered nodes, trimmed and merged, and reset the buffer."""
        nodes, self.nodes = self.nodes, []
        while nodes and nodes[-1].type == 'text':
            stripped = nodes[-1].text.rstrip(' ')
            if stripped:
                nodes[-1] = nodes[-1].model_copy(update={'text': stripped})
                break
            nodes.pop()

        merged: list[DocNode] = []
        for node in nodes:
            prev = merged[-1] if merged else None
            if prev and prev.type == node.type == 'text' and prev.marks == node.marks:
                merged[-1] = prev.model_copy(update={'text': prev.text + node.text})
            else:
                merged.append(node)
        return merged


class RichTextSchema:
    """Parse editor HTML into doc/paragraph/heading/list/... nodes with inline marks."""

    def from_html(self, html: str) -> DocNode:
        soup = BeautifulSoup(html, 'html.parser')
        return DocNode(type='doc', content=self._blocks(soup) or [_paragraph()])

    # --- block level ---

    def _blocks(self, parent: Tag) -> list[DocNode]:
        blocks: list[DocNode] = []
        buffer = _InlineBuffer()

        for child in parent.children:
            if isinstance(child, Tag) and child.name in BLOCK_TAGS:
                self._flush(buffer, blocks)
                blocks.extend(self._block(child))
            else:
                self._inline(child, [], buffer)
        self._flush(buffer, blocks)
        return blocks

    @staticmethod
    def _flush(buffer: _InlineBuffer, blocks: list[DocNode]) -> None:
        content = buffer.take()
        if content:
            blocks.append(_paragraph(content))

    def _textblock(self, tag: Tag) -> list[DocNode]:
        buffer = _InlineBuffer()
        for child in tag.children:
            self._inline(child, [], buffer)
        return buffer.take()

    def _block(self, tag: Tag) -> list[DocNode]:
        name = tag.name
        if name == 'p':
            return [_paragraph(self._textblock(tag))]
        if name in HEADING_TAGS:
            return [DocNode(type='heading', attrs={'level': HEADING_TAGS[name]},
                            content=self._textblock(tag))]
        if name in ('ul', 'ol'):
            return self._list(tag)
        if name == 'blockquote':
            return [DocNode(type='blockquote', content=self._blocks(tag) or [_paragraph()])]
        if name == 'pre':
            return [self._code_block(tag)]
        if name == 'hr':
            return [DocNode(type='horizontalRule')]
        if name == 'table':
            return self._table(tag)
        # li outside a list, div and other wrappers contribute their children
        return self._blocks(tag)

    def _list(self, tag: Tag) -> list[DocNode]:
        items = [
            DocNode(type='listItem', content=self._blocks(li) or [_paragraph()])
            for li in tag.find_all('li', recursive=False)
        ]
        if not items:
            return []
        if tag.name == 'ol':
            return [DocNode(type='orderedList', attrs={'start': _int_attr(tag, 'start', 1)}, content=items)]
        return [DocNode(type='bulletList', content=items)]

    @staticmethod
    def _code_block(tag: Tag) -> DocNode:
        language = None
        code = tag.find('code')
        if code is not None:
            for cls in code.get('class') or []:
                if cls.startswith('language-'):
                    language = cls[len('language-'):]
                    break
        text = tag.get_text()
        return DocNode(
            type='codeBlock',
            attrs={'language': language},
            content=[DocNode(type='text', text=text)] if text else [],
        )

    def _table(self, tag: Tag) -> list[DocNode]:
        rows = []
        for child in tag.find_all(True, recursive=False):
            trs = child.find_all('tr', recursive=False) if child.name in TABLE_SECTIONS else [child]
            for tr in trs:
                if tr.name != 'tr':
                    continue
                cells = [
                    DocNode(
                        type='tableHeader' if cell.name == 'th' else 'tableCell',
                        attrs={'colspan': _int_attr(cell, 'colspan', 1), 'rowspan': _int_attr(cell, 'rowspan', 1)},
                        content=self._blocks(cell) or [_paragraph()],
                    )
                    for cell in tr.find_all(['th', 'td'], recursive=False)
                ]
                if cells:
                    rows.append(DocNode(type='tableRow', content=cells))
        return [DocNode(type='table', content=rows)] if rows else []

    # --- inline level ---

    def _inline(self, node, marks: list[Mark], buffer: _InlineBuffer) -> None:
        if isinstance(node, PreformattedString):     # comments, doctypes, CDATA
            return
        if isinstance(node, NavigableString):
            buffer.add_text(str(node), marks)
            return

        name = node.name
        if name in IGNORED_TAGS:
            return
        if name == 'br':
            buffer.add_node(DocNode(type='hardBreak'))
            return
        if name == 'img':
            buffer.add_node(DocNode(type='image', attrs={
                'src': node.get('src'), 'alt': node.get('alt'), 'title': node.get('title'),
            }))
            return

        if name == 'a':
            marks = self._add_mark(marks, Mark(type='link', attrs={
                'href': node.get('href'), 'title': node.get('title'),
            }))
        elif name in MARK_TAGS:
            marks = self._add_mark(marks, Mark(type=MARK_TAGS[name]))

        for child in node.children:
            self._inline(child, marks, buffer)

    @staticmethod
    def _add_mark(marks: list[Mark], mark: Mark) -> list[Mark]:
        kept = [m for m in marks if m.type != mark.type]
        return sorted([*kept, mark], key=lambda m: MARK_RANK.get(m.type, len(MARK_RANK)))


class PlainTextSchema:
    """Parse a <pre> wrapped plain text document into doc > codeBlock > text."""

    def from_html(self, html: str) -> DocNode:
        soup = BeautifulSoup(html, 'html.parser')
        text = ''.join(pre.get_text() for pre in soup.find_all('pre'))
        return DocNode(type='doc', content=[DocNode(
            type='codeBlock',
            attrs={'language': None},
            content=[DocNode(type='text', text=text)] if text else [],
        )])
