"""Re-insert collapsed blank-line runs into rendered HTML as empty paragraphs"""

import logging

from mdcrdt.core.extract.blocks import blank_runs
from mdcrdt.core.fences import source_lines
from mdcrdt.core.models import BlankRun
from mdcrdt.core.parse import CLOSING_TAG_RE, Tokenizer


logger = logging.getLogger(__name__)

EMPTY_PARAGRAPH = '<p></p>'


def patch_html(html: str, runs: list[BlankRun]) -> str:
    """Insert extra_count empty paragraphs after the closing tag at each run's block_index.

    Closing tags are counted in document order; a run whose index is never
    reached is dropped. Returns html unchanged when there are no runs.
    """
    if not runs:
        return html

    extra = {r.block_index: r.extra_count for r in runs}
    parts: list[str] = []
    block_idx = 0
    inserted = 0

    for segment in CLOSING_TAG_RE.split(html):
        parts.append(segment)
        if CLOSING_TAG_RE.fullmatch(segment):
            if block_idx in extra:
                parts.append(EMPTY_PARAGRAPH * extra[block_idx])
                inserted += 1
            block_idx += 1

    if inserted < len(extra):
        logger.debug("Dropped %d blank run(s) with no matching closing tag", len(extra) - inserted)
    return ''.join(parts)


def preserve_blank_lines(markdown: str, html: str, tokenizer: Tokenizer) -> str:
    """Patch html so runs of 3+ blank lines in markdown survive as empty paragraphs."""
    runs = blank_runs(tokenizer.tokenize(markdown), source_lines(markdown))
    return patch_html(html, runs)
