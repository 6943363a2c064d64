"""Blank-line run detection after block tokens using source line positions"""

import logging

from mdcrdt.core.fences import fenced_lines
from mdcrdt.core.models import BlankRun, BlockToken, SourceLine


logger = logging.getLogger(__name__)

MIN_BLANK_RUN = 3   # markdown-it already keeps one break for any run of blank lines


def _is_blank(lines: list[SourceLine], fenced: set[int], i: int) -> bool:
    return i not in fenced and not lines[i].text.strip()


def _last_content_line(token: BlockToken, lines: list[SourceLine], fenced: set[int]) -> int:
    """Last line of the block, walking back over trailing blank lines inside its map."""
    end = min(token.end_line, len(lines)) - 1
    while end > token.start_line and _is_blank(lines, fenced, end):
        end -= 1
    return end


def _count_blank_after(line: int, lines: list[SourceLine], fenced: set[int]) -> int:
    count = 0
    i = line + 1
    while i < len(lines) and _is_blank(lines, fenced, i):
        count += 1
        i += 1
    return count


def blank_runs(tokens: list[BlockToken], lines: list[SourceLine]) -> list[BlankRun]:
    """Return BlankRuns for blocks followed by MIN_BLANK_RUN or more blank source lines.

    Every token takes a block_index, in order. Nested blocks ending on the same
    line share one run, which is kept on the outermost (last closing) block.
    """
    fenced = fenced_lines(lines)
    by_line: dict[int, BlankRun] = {}

    for block_index, tok in enumerate(tokens):
        if tok.start_line is None or tok.end_line is None:
            continue
        if tok.start_line in fenced:
            continue

        last = _last_content_line(tok, lines, fenced)
        count = _count_blank_after(last, lines, fenced)
        if count >= MIN_BLANK_RUN:
            by_line[last] = BlankRun(block_index=block_index, extra_count=count - 1)

    runs = sorted(by_line.values(), key=lambda r: r.block_index)
    logger.debug("Found %d blank run(s) in %d line(s)", len(runs), len(lines))
    return runs
