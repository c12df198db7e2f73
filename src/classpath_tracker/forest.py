"""Generic forest of payload trees.

Nodes own their children and reference their parent weakly, so a subtree
is kept alive only by the node above it (or by the caller for roots).
Nothing here knows about build tools; the payload is opaque.
"""

import weakref
from collections.abc import Iterable, Iterator
from typing import Any, Callable, Optional


class Node:
    """A forest element carrying an arbitrary payload.

    Attributes:
        contents: The payload.
        children: Child nodes in order.
    """

    def __init__(self, contents: Any, parent: Optional["Node"] = None) -> None:
        self.contents = contents
        self.children: list[Node] = []
        self._parent: Optional[weakref.ref] = None
        if parent is not None:
            self.parent = parent

    @property
    def parent(self) -> Optional["Node"]:
        """Return the parent node, or None for a root."""
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional["Node"]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    def add_child(self, child: "Node") -> None:
        child.parent = self
        self.children.append(child)

    def ancestors(self, include_self: bool = False) -> Iterator["Node"]:
        """Iterate upward towards the root.

        Args:
            include_self: Start with this node instead of its parent.

        Yields:
            Nodes from the closest one to the root.
        """
        node = self if include_self else self.parent
        while node is not None:
            yield node
            node = node.parent

    def __repr__(self) -> str:
        return f"Node({self.contents!r}, children={len(self.children)})"


def build_tree(
    root: Any,
    pool: Iterable[Any],
    is_child: Callable[[Any, Any], bool],
    sort_key: Optional[Callable[[Any], Any]] = None,
) -> Node:
    """Assemble a tree from a flat pool of payloads.

    Children of each payload are the pool members for which
    ``is_child(parent, candidate)`` holds.

    Args:
        root: Payload of the root node.
        pool: Candidate payloads.
        is_child: Predicate telling whether the second argument is a child
            of the first.
        sort_key: Optional key ordering siblings.

    Returns:
        The root node with children and back-references set.

    Raises:
        ValueError: If a payload would be its own ancestor.
    """
    candidates = list(pool)
    return _build_node(root, candidates, is_child, sort_key, None, [])


def _build_node(contents, candidates, is_child, sort_key, parent, path) -> Node:
    if any(contents is seen for seen in path):
        raise ValueError(f"Cycle in parent relation at {contents!r}")
    node = Node(contents, parent)
    children = [c for c in candidates if is_child(contents, c)]
    if sort_key is not None:
        children.sort(key=sort_key)
    path.append(contents)
    for child in children:
        node.children.append(
            _build_node(child, candidates, is_child, sort_key, node, path)
        )
    path.pop()
    return node


def walk(forest: Iterable[Node]) -> Iterator[Node]:
    """Iterate over all nodes of a forest in pre-order."""
    for root in forest:
        stack = [root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def find(predicate: Callable[[Any], bool], forest: Iterable[Node]) -> Optional[Any]:
    """Return the first payload satisfying predicate, depth-first.

    Returns:
        The payload, or None if nothing matches.
    """
    for node in walk(forest):
        if predicate(node.contents):
            return node.contents
    return None


def find_node(
    predicate: Callable[[Any], bool], forest: Iterable[Node]
) -> Optional[Node]:
    """Like :func:`find` but return the node holding the payload."""
    for node in walk(forest):
        if predicate(node.contents):
            return node
    return None


def collect(predicate: Callable[[Any], bool], forest: Iterable[Node]) -> list[Any]:
    """Return every payload satisfying predicate, in pre-order."""
    return [node.contents for node in walk(forest) if predicate(node.contents)]


def map_forest(
    transform: Callable[[Any], tuple[Any, bool]],
    keep: Callable[[Node], bool],
    forest: Iterable[Node],
) -> list[Node]:
    """Reshape a forest into a new one.

    ``transform`` receives a payload and returns ``(value, descend)``. When
    ``descend`` is false the original children are dropped. A resulting
    node, with its already reduced children, is retained only if
    ``keep`` accepts it.

    Returns:
        Roots of the new forest.
    """
    result = []
    for root in forest:
        mapped = _map_node(transform, keep, root)
        if mapped is not None:
            result.append(mapped)
    return result


def _map_node(transform, keep, node: Node) -> Optional[Node]:
    value, descend = transform(node.contents)
    new_node = Node(value)
    if descend:
        for child in node.children:
            mapped = _map_node(transform, keep, child)
            if mapped is not None:
                new_node.add_child(mapped)
    return new_node if keep(new_node) else None
