"""Fenced code region detection over raw markdown source lines"""

import re

from mdcrdt.core.models import FenceState, SourceLine


FENCE_RE = re.compile(r'^(`{3,}|~{3,})')


def source_lines(text: str) -> list[SourceLine]:
    """Split markdown on newlines and classify each line against the open fence."""
    state = FenceState()
    result: list[SourceLine] = []
    for index, line in enumerate(text.split('\n')):
        m = FENCE_RE.match(line)
        if m and not state.active:
            state.active, state.delimiter = True, m.group(0)
            result.append(SourceLine(index, line, is_fence_delimiter=True, is_inside_fence=True))
        elif m and line.startswith(state.delimiter):
            # The closing line is still reported as inside the fence.
            state.active, state.delimiter = False, ''
            result.append(SourceLine(index, line, is_fence_delimiter=True, is_inside_fence=True))
        else:
            result.append(SourceLine(index, line, is_fence_delimiter=False, is_inside_fence=state.active))
    return result


def fenced_lines(lines: list[SourceLine]) -> set[int]:
    """Return indices of lines that lie inside a fenced code block (delimiters included)."""
    return {line.index for line in lines if line.is_inside_fence}
