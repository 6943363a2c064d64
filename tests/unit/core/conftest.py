"""Shared fixtures for core unit tests"""

import pytest

from mdcrdt.core.fences import source_lines
from mdcrdt.core.parse import MarkdownRenderer


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.



Another paragraph after three blank lines.

- item one
- item two

```python
print("hello")



print("world")
```

> A quote.
"""


@pytest.fixture(name="renderer")
def renderer_fixture():
    return MarkdownRenderer("gfm-like")


@pytest.fixture(name="html_renderer")
def html_renderer_fixture():
    return MarkdownRenderer("gfm-like", allow_html=True)


@pytest.fixture(name="sample_lines")
def sample_lines_fixture():
    return source_lines(SAMPLE_MD)


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
