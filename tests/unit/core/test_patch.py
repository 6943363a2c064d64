"""Unit tests for core/patch.py"""

import pytest

from mdcrdt.core.models import BlankRun
from mdcrdt.core.patch import EMPTY_PARAGRAPH, patch_html, preserve_blank_lines


TWO_PARAS = "<p>A</p>\n<p>B</p>\n"


def test_no_runs_returns_input():
    assert patch_html(TWO_PARAS, []) == TWO_PARAS


def test_inserts_after_matching_closing_tag():
    """extra_count empty paragraphs follow the closing tag at block_index."""
    assert patch_html(TWO_PARAS, [BlankRun(0, 2)]) == "<p>A</p><p></p><p></p>\n<p>B</p>\n"


def test_second_block():
    assert patch_html(TWO_PARAS, [BlankRun(1, 1)]) == "<p>A</p>\n<p>B</p><p></p>\n"


def test_unmatched_run_is_dropped():
    """A run past the last closing tag leaves the HTML untouched."""
    assert patch_html(TWO_PARAS, [BlankRun(7, 3)]) == TWO_PARAS


def test_container_closing_tag():
    html = "<blockquote>\n<p>A</p>\n</blockquote>\n<p>B</p>\n"
    expected = "<blockquote>\n<p>A</p>\n</blockquote><p></p><p></p>\n<p>B</p>\n"
    assert patch_html(html, [BlankRun(1, 2)]) == expected


@pytest.mark.parametrize("tag", ["h1", "h6", "ul", "ol", "div"])
def test_all_tracked_closing_tags_count(tag):
    html = f"<{tag}>x</{tag}><p>y</p>"
    assert patch_html(html, [BlankRun(1, 1)]) == f"<{tag}>x</{tag}><p>y</p>{EMPTY_PARAGRAPH}"


def test_untracked_closing_tags_do_not_count():
    html = "<p><em>a</em></p><pre><code>x</code></pre><p>b</p>"
    assert patch_html(html, [BlankRun(1, 1)]) == html + EMPTY_PARAGRAPH


# --- preserve_blank_lines against markdown-it output ---

@pytest.mark.parametrize("md", ["A\n\nB", "A\n\n\nB", "# H\n\nText\n\n- a\n- b\n"])
def test_no_qualifying_runs_is_identity(renderer, md):
    """Without a run of three blank lines the rendered HTML is returned as is."""
    html = renderer.render(md)
    assert preserve_blank_lines(md, html, renderer) == html


def test_paragraph_run(renderer):
    md = "A\n\n\n\nB"
    assert preserve_blank_lines(md, renderer.render(md), renderer) == "<p>A</p><p></p><p></p>\n<p>B</p>\n"


def test_fenced_blank_lines_are_exempt(renderer):
    md = "A\n\n```\n\n\n\n\n```\n\nB"
    html = renderer.render(md)
    assert preserve_blank_lines(md, html, renderer) == html


def test_tight_list_run(renderer):
    md = "- a\n- b\n\n\n\nB"
    patched = preserve_blank_lines(md, renderer.render(md), renderer)
    assert "</ul><p></p><p></p>\n<p>B</p>" in patched
    assert patched.count(EMPTY_PARAGRAPH) == 2


def test_blockquote_run_goes_after_container(renderer):
    md = "> A\n\n\n\nB"
    patched = preserve_blank_lines(md, renderer.render(md), renderer)
    assert "</blockquote><p></p><p></p>" in patched
    assert patched.count(EMPTY_PARAGRAPH) == 2


def test_run_after_raw_html(html_renderer):
    """Closing tags from raw HTML shift the ordinal consistently on both sides."""
    md = "<div>\n<p>raw</p>\n</div>\n\nA\n\n\n\nB"
    patched = preserve_blank_lines(md, html_renderer.render(md), html_renderer)
    assert "<p>A</p><p></p><p></p>" in patched
    assert patched.count(EMPTY_PARAGRAPH) == 2
