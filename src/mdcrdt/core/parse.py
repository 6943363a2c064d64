"""markdown-it tokenization and rendering, with closing-tag ordered block tokens"""

import logging
import re
from typing import Protocol

from markdown_it import MarkdownIt

from mdcrdt.core.models import BlockKind, BlockToken


logger = logging.getLogger(__name__)

# Closing tags the HTML patcher splits on. Anything the renderer writes that
# matches this must show up as exactly one BlockToken, in the same order.
CLOSING_TAG_RE = re.compile(r'(</(?:h[1-6]|p|ul|ol|blockquote|div)>)')

TRACKED_OPEN = {
    'heading_open', 'paragraph_open', 'bullet_list_open', 'ordered_list_open', 'blockquote_open',
}

BLOCK_KIND_MAP: dict[str, BlockKind] = {
    'heading_close':      BlockKind.heading,
    'paragraph_close':    BlockKind.paragraph,
    'bullet_list_close':  BlockKind.bullet_list,
    'ordered_list_close': BlockKind.ordered_list,
    'blockquote_close':   BlockKind.blockquote,
}


class Tokenizer(Protocol):
    def tokenize(self, markdown: str) -> list[BlockToken]: ...


class Renderer(Protocol):
    def render(self, markdown: str) -> str: ...


class MarkdownEngine(Tokenizer, Renderer, Protocol):
    """Renders markdown and reports its tracked blocks in closing-tag order."""


def _make_parser(preset: str, allow_html: bool = False) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False, "html": allow_html})


def _raw_closings(content: str) -> list[BlockToken]:
    """One raw_html token per tracked closing tag found in verbatim HTML."""
    return [BlockToken(kind=BlockKind.raw_html) for _ in CLOSING_TAG_RE.findall(content)]


class MarkdownRenderer:
    """Tokenizer and Renderer backed by a single MarkdownIt instance."""

    def __init__(self, preset: str = 'gfm-like', allow_html: bool = False):
        self.md = _make_parser(preset, allow_html)

    def render(self, markdown: str) -> str:
        return self.md.render(markdown)

    def tokenize(self, markdown: str) -> list[BlockToken]:
        """Return tracked blocks in the order their closing tags are rendered.

        Source spans come from the matching open token's map. Paragraphs hidden
        inside tight lists render no tag, so they are left out; closing tags
        passed through from raw HTML are included as raw_html tokens.
        """
        blocks: list[BlockToken] = []
        spans: list = []

        for tok in self.md.parse(markdown):
            if tok.type in TRACKED_OPEN:
                spans.append(tok.map)
            elif tok.type in BLOCK_KIND_MAP:
                span = spans.pop() if spans else None
                if tok.hidden:
                    continue
                if span:
                    blocks.append(BlockToken(BLOCK_KIND_MAP[tok.type], span[0], span[1]))
                else:
                    blocks.append(BlockToken(kind=BlockKind.raw_html))
            elif tok.type == 'html_block':
                blocks.extend(_raw_closings(tok.content))
            elif tok.type == 'inline' and tok.children:
                for child in tok.children:
                    if child.type == 'html_inline':
                        blocks.extend(_raw_closings(child.content))

        logger.debug("Tokenized %d tracked block(s)", len(blocks))
        return blocks
