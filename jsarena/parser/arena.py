"""
Append-only tree arena.

Nodes are addressed by ``Index``. Allocation is the only mutation, apart
from patching a slot obtained from ``reserve_placeholder`` (used by
function and class declarations, whose node slot exists before their body
is parsed). Structural invariants are checked on every write; a violation
is a parser bug and raises ``InternalParserError``.
"""

from typing import Iterator, List

from ..lexer.tokens import Span
from .ast_nodes import Index, Item, Node, Reserved, child_indices
from .errors import InternalParserError


class Arena:
    """Ordered store of ``Node`` records for one parse call."""

    def __init__(self):
        self._nodes: List[Node] = []

    def allocate(self, span: Span, item: Item) -> Index:
        """Append a node and return its index."""
        self._check(span, item)
        self._nodes.append(Node(span, item))
        return Index(len(self._nodes) - 1)

    def reserve_placeholder(self, start: int) -> Index:
        """Hand out a slot to be filled later by ``patch``."""
        self._nodes.append(Node(Span(start, start), Reserved()))
        return Index(len(self._nodes) - 1)

    def patch(self, index: Index, span: Span, item: Item):
        """Fill a reserved slot. Only ``Reserved`` slots may be patched."""
        if not isinstance(self.get(index).item, Reserved):
            raise InternalParserError(f"node {index} was not reserved")
        if isinstance(item, Reserved):
            raise InternalParserError(f"node {index} patched with another placeholder")
        self._check(span, item)
        self._nodes[index] = Node(span, item)

    def get(self, index: Index) -> Node:
        if not 0 <= index < len(self._nodes):
            raise InternalParserError(f"index {index} outside arena of {len(self._nodes)} nodes")
        return self._nodes[index]

    @staticmethod
    def children(item: Item) -> Iterator[Index]:
        return child_indices(item)

    def __getitem__(self, index: Index) -> Node:
        return self.get(index)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def _check(self, span: Span, item: Item):
        if span.start > span.end:
            raise InternalParserError(f"inverted span {span} for {type(item).__name__}")
        for child in child_indices(item):
            child_span = self.get(child).span
            if not span.contains(child_span):
                raise InternalParserError(
                    f"{type(item).__name__} at {span} does not contain child {child} at {child_span}"
                )
