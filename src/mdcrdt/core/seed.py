"""Deterministic CRDT seeding: mirror a document tree into a Yjs update"""

import json
import logging
from typing import Any, Optional, Protocol, Union

from pycrdt import Doc, XmlElement, XmlFragment, XmlText

from mdcrdt.core.models import DocNode, Mark


logger = logging.getLogger(__name__)

# Update encoding embeds the client id; a fixed id makes identical trees
# encode to identical bytes wherever they are generated.
SCRATCH_CLIENT_ID = 0
SHARED_ROOT = 'default'


class CrdtBackend(Protocol):
    def new_document(self, client_id: int) -> Doc: ...
    def encode_update(self, doc: Doc) -> bytes: ...
    def apply_update(self, doc: Doc, update: bytes) -> None: ...


class PycrdtBackend:
    """CrdtBackend over pycrdt documents."""

    def new_document(self, client_id: int) -> Doc:
        return Doc(client_id=client_id)

    def encode_update(self, doc: Doc) -> bytes:
        return doc.get_update()

    def apply_update(self, doc: Doc, update: bytes) -> None:
        doc.apply_update(update)


def _attr_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _attributes(node: DocNode) -> dict[str, str]:
    """Element attributes as strings; None values are not written."""
    return {k: _attr_value(v) for k, v in node.attrs.items() if v is not None}


def _format_value(mark: Mark) -> Union[dict, str]:
    """Formatting value for mark: an empty map, or its attributes as sorted JSON.

    yrs keeps map values in hash maps whose encoded key order varies from run
    to run, so attributes are written as one string with a fixed key order.
    """
    attrs = {k: v for k, v in mark.attrs.items() if v is not None}
    return json.dumps(attrs, sort_keys=True, separators=(',', ':')) if attrs else {}


def _append_text(parent: Union[XmlFragment, XmlElement], nodes: list[DocNode]) -> None:
    """Write consecutive text nodes as one XmlText, marks becoming formatting attributes.

    Every format call carries a single key so the encoded item order is fixed.
    """
    ytext = parent.children.append(XmlText())
    ytext.insert(0, ''.join(node.text for node in nodes))
    offset = 0
    for node in nodes:
        end = offset + len(node.text)
        for mark in node.marks:
            ytext.format(offset, end, {mark.type: _format_value(mark)})
        offset = end


def _append_element(parent: Union[XmlFragment, XmlElement], node: DocNode) -> XmlElement:
    element = parent.children.append(XmlElement(node.type))
    for key, value in sorted(_attributes(node).items()):
        element.attributes[key] = value
    return element


def _mirror_content(nodes: list[DocNode], parent: Union[XmlFragment, XmlElement]) -> None:
    text_run: list[DocNode] = []
    for node in nodes:
        if node.type == 'text':
            if node.text:
                text_run.append(node)
            continue
        if text_run:
            _append_text(parent, text_run)
            text_run = []
        _mirror_content(node.content, _append_element(parent, node))
    if text_run:
        _append_text(parent, text_run)


def mirror_tree(tree: DocNode, fragment: XmlFragment) -> None:
    """Write the children of tree's root node into fragment, preserving order."""
    _mirror_content(tree.content, fragment)


def scratch_document(
    tree: DocNode,
    backend: Optional[CrdtBackend] = None,
    root_name: str = SHARED_ROOT,
    client_id: int = SCRATCH_CLIENT_ID,
    ) -> Doc:
    """Return a fresh document with fixed client id holding tree under root_name."""
    backend = backend or PycrdtBackend()
    doc = backend.new_document(client_id)
    root = doc.get(root_name, type=XmlFragment)
    if not root.is_integrated:
        logger.warning("Shared root %r is not attached; leaving scratch document empty", root_name)
        return doc
    with doc.transaction():
        mirror_tree(tree, root)
    return doc


def seed(
    target_doc: Doc,
    tree: DocNode,
    backend: Optional[CrdtBackend] = None,
    root_name: str = SHARED_ROOT,
    ) -> bytes:
    """Merge the deterministic update for tree into target_doc; return the update."""
    backend = backend or PycrdtBackend()
    update = backend.encode_update(scratch_document(tree, backend, root_name))
    backend.apply_update(target_doc, update)
    logger.debug("Applied %d byte initial update to root %r", len(update), root_name)
    return update

