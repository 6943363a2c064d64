"""Pipeline step functions: render, build, and seed orchestration for files"""

from pathlib import Path
from typing import Optional

from pycrdt import Doc

from mdcrdt.config import Settings
from mdcrdt.core.builder import build_document, initial_html
from mdcrdt.core.models import DocNode
from mdcrdt.core.parse import MarkdownRenderer
from mdcrdt.core.seed import seed
from mdcrdt.core.utils.hashing import sha256


STATE_SUFFIX = '.ystate'


def make_renderer(settings: Settings) -> MarkdownRenderer:
    return MarkdownRenderer(settings.parser_config, settings.allow_html)


def render_html(markdown: str, settings: Settings) -> str:
    """Return the blank-line patched HTML the rich editor would receive."""
    return initial_html(markdown, True, make_renderer(settings))


def build_tree(content: str, is_rich_editor: bool, settings: Settings) -> DocNode:
    renderer = make_renderer(settings) if is_rich_editor else None
    return build_document(content, is_rich_editor, renderer)


def seed_initial_state(
    target_doc: Doc,
    content: str,
    *,
    is_rich_editor: bool,
    settings: Optional[Settings] = None,
    ) -> bytes:
    """Build the initial document for content and merge it into target_doc.

    The same content and mode always yield the same update bytes, so a server
    can generate the state that every client would compute for itself.
    """
    settings = settings or Settings()
    tree = build_tree(content, is_rich_editor, settings)
    return seed(target_doc, tree, root_name=settings.shared_root)


def run_seed(
    path: Path,
    out: Optional[Path],
    is_rich_editor: bool,
    settings: Settings,
    ) -> tuple[Path, str]:
    """Seed a fresh document from path and write the update. Returns (out_path, sha256 digest)."""
    try:
        content = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Failed to read {path}: {e}") from e

    update = seed_initial_state(Doc(), content, is_rich_editor=is_rich_editor, settings=settings)
    out_path = out or path.with_suffix(STATE_SUFFIX)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(update)
    return out_path, sha256(update)
