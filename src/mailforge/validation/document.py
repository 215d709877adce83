"""
Index-based node arena for email HTML.

The tokenizer is the standard library's html.parser. Every node keeps the
exact source slice it came from, so a document nobody touched serializes back
byte-for-byte and a repair only rewrites the nodes it marks dirty.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Iterator, List, Optional, Tuple

from ..errors import MalformedDocumentError

LOGGER = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0e-\x1f]")
_HTML_CLOSE = re.compile(r"</html\s*>", re.IGNORECASE)

Attribute = Tuple[str, Optional[str]]


@dataclass(slots=True)
class Node:
    """One arena slot. ``kind`` is element, text, comment, decl, pi or stray."""

    id: int
    kind: str
    tag: str | None = None
    attrs: List[Attribute] = field(default_factory=list)
    parent: int | None = None
    children: List[int] = field(default_factory=list)
    line: int = 1
    data: str = ""
    raw: str = ""
    end_raw: str = ""
    closed: bool = True
    self_closing: bool = False
    dirty: bool = False
    removed: bool = False

    @property
    def is_element(self) -> bool:
        return self.kind == "element"

    def get(self, name: str, default: str | None = None) -> str | None:
        for key, value in self.attrs:
            if key == name:
                return value if value is not None else ""
        return default

    def has(self, name: str) -> bool:
        return any(key == name for key, _ in self.attrs)

    def start_tag(self) -> str:
        """Markup for the start tag, rebuilt from attrs when the node was edited."""
        if not self.dirty:
            return self.raw
        parts = [self.tag or ""]
        for name, value in self.attrs:
            parts.append(name if value is None else f'{name}="{_escape_attr(value)}"')
        return "<" + " ".join(parts) + (" />" if self.self_closing else ">")

    def snippet(self, limit: int = 80) -> str:
        text = (self.raw if self.kind != "text" else self.data).strip()
        return text if len(text) <= limit else text[: limit - 3] + "..."


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


class Document:
    """Parsed email document; nodes are addressed by their arena index."""

    def __init__(self, source: str, nodes: List[Node], roots: List[int]) -> None:
        self.source = source
        self.nodes = nodes
        self.roots = roots

    # -- reading -----------------------------------------------------------

    def node(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def walk(self, start: Optional[List[int]] = None) -> Iterator[Node]:
        """Depth-first, document order, skipping removed subtrees."""
        stack = list(reversed(self.roots if start is None else start))
        while stack:
            node = self.nodes[stack.pop()]
            if node.removed:
                continue
            yield node
            stack.extend(reversed(node.children))

    def elements(self, *tags: str) -> Iterator[Node]:
        wanted = set(tags)
        for node in self.walk():
            if node.is_element and (not wanted or node.tag in wanted):
                yield node

    def first(self, tag: str) -> Node | None:
        return next(self.elements(tag), None)

    def lineage(self, node: Node) -> Iterator[Node]:
        """The node itself followed by its ancestors, innermost first."""
        current: Node | None = node
        while current is not None:
            yield current
            current = self.nodes[current.parent] if current.parent is not None else None

    def direct_text(self, node: Node) -> str:
        return "".join(self.nodes[child].data for child in node.children if self.nodes[child].kind == "text")

    def text_content(self, node: Node) -> str:
        return "".join(child.data for child in self.walk(node.children) if child.kind == "text")

    def doctype(self) -> Node | None:
        for node in self.walk():
            if node.kind == "decl" and node.data.lower().startswith("doctype"):
                return node
        return None

    def comments(self) -> Iterator[Node]:
        return (node for node in self.walk() if node.kind == "comment")

    def unclosed(self) -> List[Node]:
        return [node for node in self.elements() if not node.closed]

    def strays(self) -> List[Node]:
        return [node for node in self.walk() if node.kind == "stray"]

    # -- editing -----------------------------------------------------------

    def set_attr(self, node: Node, name: str, value: str) -> None:
        for idx, (key, _) in enumerate(node.attrs):
            if key == name:
                node.attrs[idx] = (name, value)
                break
        else:
            node.attrs.append((name, value))
        node.dirty = True

    def remove_attr(self, node: Node, name: str) -> None:
        node.attrs = [(key, value) for key, value in node.attrs if key != name]
        node.dirty = True

    def remove(self, node: Node) -> None:
        siblings = self.roots if node.parent is None else self.nodes[node.parent].children
        siblings.remove(node.id)
        node.removed = True

    def insert(self, parent: Node | None, index: int, kind: str, raw: str, data: str = "") -> Node:
        """Add a leaf node holding ``raw`` markup at ``index`` among the parent's children."""
        node = Node(id=len(self.nodes), kind=kind, raw=raw, data=data, parent=parent.id if parent else None)
        self.nodes.append(node)
        siblings = self.roots if parent is None else parent.children
        siblings.insert(index, node.id)
        return node

    # -- output ------------------------------------------------------------

    def serialize(self) -> str:
        return "".join(self._render(node_id) for node_id in self.roots)

    def _render(self, node_id: int) -> str:
        node = self.nodes[node_id]
        if node.removed:
            return ""
        if not node.is_element:
            return node.raw
        inner = "".join(self._render(child) for child in node.children)
        return node.start_tag() + inner + node.end_raw


class _ArenaBuilder(HTMLParser):
    def __init__(self, source: str) -> None:
        super().__init__(convert_charrefs=True)
        self.source = source
        self.nodes: List[Node] = []
        self.roots: List[int] = []
        self._stack: List[Node] = []
        self._line_starts = [0] + [idx + 1 for idx, ch in enumerate(source) if ch == "\n"]
        # (offset, node, part): part is "start" or "end"
        self._marks: List[Tuple[int, Node, str]] = []

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _add(self, kind: str, **values) -> Node:
        node = Node(id=len(self.nodes), kind=kind, line=self.getpos()[0], **values)
        self.nodes.append(node)
        if self._stack:
            node.parent = self._stack[-1].id
            self._stack[-1].children.append(node.id)
        else:
            self.roots.append(node.id)
        self._marks.append((self._offset(), node, "start"))
        return node

    def handle_starttag(self, tag, attrs):
        node = self._add("element", tag=tag, attrs=list(attrs))
        if tag not in VOID_ELEMENTS:
            self._stack.append(node)

    def handle_startendtag(self, tag, attrs):
        self._add("element", tag=tag, attrs=list(attrs), self_closing=True)

    def handle_endtag(self, tag):
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].tag == tag:
                break
        else:
            self._add("stray", tag=tag)
            return
        while len(self._stack) > depth + 1:
            # Closed implicitly by an outer end tag.
            self._stack.pop().closed = False
        element = self._stack.pop()
        self._marks.append((self._offset(), element, "end"))

    def handle_data(self, data):
        self._add("text", data=data)

    def handle_comment(self, data):
        self._add("comment", data=data)

    def handle_decl(self, decl):
        self._add("decl", data=decl)

    def unknown_decl(self, data):
        self._add("decl", data=data)

    def handle_pi(self, data):
        self._add("pi", data=data)

    def build(self) -> Document:
        self.feed(self.source)
        self.close()
        for element in self._stack:
            element.closed = False
        self._stack.clear()
        offsets = [offset for offset, _, _ in self._marks] + [len(self.source)]
        # Bytes before the first event (never expected) stay attached to it.
        if self._marks:
            offsets[0] = 0
        for idx, (offset, node, part) in enumerate(self._marks):
            chunk = self.source[offsets[idx] : offsets[idx + 1]]
            if part == "end":
                node.end_raw = chunk
            else:
                node.raw = chunk
        return Document(self.source, self.nodes, self.roots)


def parse_document(html: str | bytes) -> Document:
    """
    Parse email HTML into a node arena.

    Raises:
        MalformedDocumentError: for binary content or a document without
            a closing html tag.
    """
    if isinstance(html, bytes):
        try:
            html = html.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedDocumentError("Document is not valid UTF-8 text") from exc
    match = _CONTROL_CHARS.search(html)
    if match:
        raise MalformedDocumentError(f"Document contains binary data at offset {match.start()}")
    if not _HTML_CLOSE.search(html):
        raise MalformedDocumentError("Document has no closing </html> tag")
    document = _ArenaBuilder(html).build()
    LOGGER.debug("Parsed document into %s nodes", len(document.nodes))
    return document

