"""Intermediate data models for the blank-line and document-tree pipeline"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class BlockKind(str, Enum):
    heading = "heading"
    paragraph = "paragraph"
    bullet_list = "bullet_list"
    ordered_list = "ordered_list"
    blockquote = "blockquote"
    raw_html = "raw_html"           # closing tag written verbatim from inline/block HTML


@dataclass(frozen=True)
class SourceLine:
    """One line of the original markdown with its fence classification."""
    index:              int
    text:               str
    is_fence_delimiter: bool
    is_inside_fence:    bool


@dataclass
class FenceState:
    active:    bool = False
    delimiter: str = ''


@dataclass(frozen=True)
class BlockToken:
    """A tracked block in the order its closing tag is rendered."""
    kind:       BlockKind
    start_line: Optional[int] = None
    end_line:   Optional[int] = None    # exclusive, like markdown-it token.map[1]


@dataclass(frozen=True)
class BlankRun:
    block_index: int
    extra_count: int


class Mark(BaseModel):
    type: str
    attrs: dict[str, Any] = Field(default_factory=dict)


class DocNode(BaseModel):
    """A node of the structured document tree (ProseMirror JSON shape)."""
    type: str
    attrs: dict[str, Any] = Field(default_factory=dict)
    content: list["DocNode"] = Field(default_factory=list)
    text: Optional[str] = None      # only set on text nodes
    marks: list[Mark] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Return the node as a JSON-ready dict, omitting empty fields."""
        return self.model_dump(exclude_defaults=True)
