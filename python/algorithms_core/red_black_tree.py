"""Red-black tree ordered container.

A red-black tree is a binary search tree guaranteeing that no path from the
root to a leaf is more than twice as long as any other such path, so its
height is logarithmic in the number of stored values. The implementation
follows Cormen, Leiserson, Rivest and Stein, *Introduction to Algorithms*.

Two node flavors share all of the tree-shape logic:

* :class:`Node` holds the colour, value and the left/right/parent links.
* :class:`LinkedNode` additionally threads every node into a doubly-linked
  list in sorted order so that successor and predecessor queries are O(1).

``None`` stands for the nil leaves of the abstract tree, which are black.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")

Comparator = Callable[[Any, Any], int]


class NodeColor(Enum):
    RED = "red"
    BLACK = "black"


RED = NodeColor.RED
BLACK = NodeColor.BLACK


def natural_order(left: Any, right: Any) -> int:
    """Three-way comparison using the values' own ordering."""
    return (left > right) - (left < right)


class Node(Generic[T]):
    """Tree node; ``parent`` records a relation and never owns its target."""

    __slots__ = ("value", "color", "left", "right", "parent")

    linked = False

    def __init__(self, value: T) -> None:
        self.value = value
        self.color = BLACK
        self.left: Optional[Node[T]] = None
        self.right: Optional[Node[T]] = None
        self.parent: Optional[Node[T]] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r}, {self.color.value})"


class LinkedNode(Node[T]):
    """Node that also links to its in-order predecessor and successor."""

    __slots__ = ("predecessor", "successor")

    linked = True

    def __init__(self, value: T) -> None:
        super().__init__(value)
        self.predecessor: Optional[LinkedNode[T]] = None
        self.successor: Optional[LinkedNode[T]] = None


def color_of(node: Optional[Node]) -> NodeColor:
    """Colour of ``node``, treating ``None`` as a black nil leaf."""
    return BLACK if node is None else node.color


def _set_color(node: Optional[Node], color: NodeColor) -> None:
    if node is not None:
        node.color = color


class RedBlackTree(Generic[T]):
    """Ordered set of values kept in a red-black tree.

    Parameters
    ----------
    compare
        Total order on the values returning a negative, zero or positive
        integer for less, equal or greater. Defaults to :func:`natural_order`.
    linked
        Store :class:`LinkedNode` instances so :meth:`successor` and
        :meth:`predecessor` follow threaded links instead of walking the tree.
    """

    def __init__(self, compare: Optional[Comparator] = None, *, linked: bool = False) -> None:
        self._compare: Comparator = compare if compare is not None else natural_order
        self._node_type = LinkedNode if linked else Node
        self._root: Optional[Node[T]] = None
        self._size = 0

    @property
    def linked(self) -> bool:
        return self._node_type.linked

    def insert(self, value: T) -> bool:
        """Insert ``value``; return False if an equal value is already stored."""

        node: Optional[Node[T]] = None
        parent = self._root
        while parent is not None:
            delta = self._compare(parent.value, value)
            if delta < 0:
                if parent.right is None:
                    node = self._node_type(value)
                    parent.right = node
                    node.parent = parent
                    parent = None
                else:
                    parent = parent.right
            elif delta > 0:
                if parent.left is None:
                    node = self._node_type(value)
                    parent.left = node
                    node.parent = parent
                    parent = None
                else:
                    parent = parent.left
            else:
                return False
        if node is None:
            node = self._node_type(value)
            self._root = node

        node.color = RED
        self._fix_after_insertion(node)
        self._size += 1

        if node.linked:
            self._post_insert(node)
        return True

    def remove(self, value: T) -> bool:
        """Remove ``value``; return False if it is not stored.

        When the node holding ``value`` has two children its value is exchanged
        with that of its in-order successor and the successor node is removed
        instead, so a node handle obtained earlier may end up holding a
        different value.
        """

        node = self.node(value)
        if node is None:
            return False
        if node.left is not None and node.right is not None:
            successor = self._successor_internal(node)
            self._exchange_values(node, successor)
            node = successor

        replacement = node.left if node.left is not None else node.right
        if replacement is not None:
            replacement.parent = node.parent
            if node.parent is None:
                self._root = replacement
            elif node is node.parent.left:
                node.parent.left = replacement
            else:
                node.parent.right = replacement
            node.left = node.right = node.parent = None
            if node.color is BLACK:
                self._fix_after_removal(replacement)
        elif node.parent is None:
            self._root = None
        else:
            # the childless node stands in for the nil leaf during the fix-up
            if node.color is BLACK:
                self._fix_after_removal(node)
            parent = node.parent
            if parent is not None:
                if node is parent.left:
                    parent.left = None
                elif node is parent.right:
                    parent.right = None
                node.parent = None

        self._size -= 1
        if node.linked:
            self._post_delete(node)
        return True

    def contains(self, value: T) -> bool:
        return self.node(value) is not None

    def node(self, value: T) -> Optional[Node[T]]:
        """Return the node storing ``value``, None if none."""

        node = self._root
        while node is not None:
            delta = self._compare(node.value, value)
            if delta < 0:
                node = node.right
            elif delta > 0:
                node = node.left
            else:
                break
        return node

    def size(self) -> int:
        return self._size

    def root(self) -> Optional[Node[T]]:
        return self._root

    def first_node(self) -> Optional[Node[T]]:
        result = self._root
        if result is not None:
            while result.left is not None:
                result = result.left
        return result

    def last_node(self) -> Optional[Node[T]]:
        result = self._root
        if result is not None:
            while result.right is not None:
                result = result.right
        return result

    def predecessor(self, node: Optional[Node[T]]) -> Optional[Node[T]]:
        """Node holding the largest value smaller than ``node``'s value."""

        if node is None:
            return None
        if node.linked:
            return node.predecessor
        return self._predecessor_internal(node)

    def successor(self, node: Optional[Node[T]]) -> Optional[Node[T]]:
        """Node holding the smallest value larger than ``node``'s value."""

        if node is None:
            return None
        if node.linked:
            return node.successor
        return self._successor_internal(node)

    def clear(self) -> None:
        """Release every node, visiting the tree in level order."""

        queue = deque()
        if self._root is not None:
            queue.append(self._root)
        while queue:
            node = queue.popleft()
            if node.left is not None:
                queue.append(node.left)
            if node.right is not None:
                queue.append(node.right)
            node.left = node.right = node.parent = None
            if node.linked:
                node.predecessor = node.successor = None
        self._root = None
        self._size = 0

    def black_height(self) -> int:
        """Check the red-black invariants and return the tree's black height.

        The black height counts the black nodes below the root on any path to
        a nil leaf. Raises :class:`ValueError` naming the first violated
        invariant.
        """

        if self._root is None:
            if self._size != 0:
                raise ValueError(f"empty tree reports size {self._size}")
            return 0
        if self._root.color is not BLACK:
            raise ValueError("root is not black")
        if self._root.parent is not None:
            raise ValueError("root has a parent")

        nodes = list(self._in_order())
        if len(nodes) != self._size:
            raise ValueError(f"tree holds {len(nodes)} nodes but reports size {self._size}")
        for previous, current in zip(nodes, nodes[1:]):
            if self._compare(previous.value, current.value) >= 0:
                raise ValueError(
                    f"values {previous.value!r} and {current.value!r} are out of order"
                )
        if self.linked:
            for index, current in enumerate(nodes):
                expected_pred = nodes[index - 1] if index > 0 else None
                expected_succ = nodes[index + 1] if index + 1 < len(nodes) else None
                if current.predecessor is not expected_pred or current.successor is not expected_succ:
                    raise ValueError(f"order links of {current.value!r} disagree with the tree")

        return self._subtree_black_height(self._root) - 1

    def _subtree_black_height(self, node: Optional[Node[T]]) -> int:
        if node is None:
            return 1
        if node.color is RED and (color_of(node.left) is RED or color_of(node.right) is RED):
            raise ValueError(f"red node {node.value!r} has a red child")
        for child in (node.left, node.right):
            if child is not None and child.parent is not node:
                raise ValueError(f"child {child.value!r} does not point back to {node.value!r}")
        left = self._subtree_black_height(node.left)
        right = self._subtree_black_height(node.right)
        if left != right:
            raise ValueError(f"black heights differ below {node.value!r}: {left} != {right}")
        return left + (1 if node.color is BLACK else 0)

    def _in_order(self) -> Iterator[Node[T]]:
        stack: List[Node[T]] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def _rotate_left(self, node: Node[T]) -> None:
        temp = node.right
        node.right = temp.left
        if temp.left is not None:
            temp.left.parent = node
        temp.parent = node.parent
        if node.parent is None:
            self._root = temp
        elif node is node.parent.left:
            node.parent.left = temp
        else:
            node.parent.right = temp
        temp.left = node
        node.parent = temp

    def _rotate_right(self, node: Node[T]) -> None:
        temp = node.left
        node.left = temp.right
        if temp.right is not None:
            temp.right.parent = node
        temp.parent = node.parent
        if node.parent is None:
            self._root = temp
        elif node is node.parent.right:
            node.parent.right = temp
        else:
            node.parent.left = temp
        temp.right = node
        node.parent = temp

    def _fix_after_insertion(self, node: Node[T]) -> None:
        while color_of(node.parent) is RED:
            parent = node.parent
            grandparent = parent.parent
            if parent is grandparent.left:
                uncle = grandparent.right
                if color_of(uncle) is RED:
                    _set_color(parent, BLACK)
                    _set_color(uncle, BLACK)
                    _set_color(grandparent, RED)
                    node = grandparent
                else:
                    if node is parent.right:
                        node = parent
                        self._rotate_left(node)
                    _set_color(node.parent, BLACK)
                    _set_color(node.parent.parent, RED)
                    self._rotate_right(node.parent.parent)
            else:
                uncle = grandparent.left
                if color_of(uncle) is RED:
                    _set_color(parent, BLACK)
                    _set_color(uncle, BLACK)
                    _set_color(grandparent, RED)
                    node = grandparent
                else:
                    if node is parent.left:
                        node = parent
                        self._rotate_right(node)
                    _set_color(node.parent, BLACK)
                    _set_color(node.parent.parent, RED)
                    self._rotate_left(node.parent.parent)
        _set_color(self._root, BLACK)

    def _fix_after_removal(self, node: Node[T]) -> None:
        while node is not self._root and color_of(node) is BLACK:
            if node is node.parent.left:
                sibling = node.parent.right
                if color_of(sibling) is RED:
                    _set_color(sibling, BLACK)
                    _set_color(node.parent, RED)
                    self._rotate_left(node.parent)
                    sibling = node.parent.right
                if color_of(sibling.left) is BLACK and color_of(sibling.right) is BLACK:
                    _set_color(sibling, RED)
                    node = node.parent
                else:
                    if color_of(sibling.right) is BLACK:
                        _set_color(sibling.left, BLACK)
                        _set_color(sibling, RED)
                        self._rotate_right(sibling)
                        sibling = node.parent.right
                    _set_color(sibling, color_of(node.parent))
                    _set_color(node.parent, BLACK)
                    _set_color(sibling.right, BLACK)
                    self._rotate_left(node.parent)
                    node = self._root
            else:
                sibling = node.parent.left
                if color_of(sibling) is RED:
                    _set_color(sibling, BLACK)
                    _set_color(node.parent, RED)
                    self._rotate_right(node.parent)
                    sibling = node.parent.left
                if color_of(sibling.right) is BLACK and color_of(sibling.left) is BLACK:
                    _set_color(sibling, RED)
                    node = node.parent
                else:
                    if color_of(sibling.left) is BLACK:
                        _set_color(sibling.right, BLACK)
                        _set_color(sibling, RED)
                        self._rotate_left(sibling)
                        sibling = node.parent.left
                    _set_color(sibling, color_of(node.parent))
                    _set_color(node.parent, BLACK)
                    _set_color(sibling.left, BLACK)
                    self._rotate_right(node.parent)
                    node = self._root
        _set_color(node, BLACK)

    def _exchange_values(self, node: Node[T], successor: Node[T]) -> None:
        """Swap the values of ``node`` and the ``successor`` about to be removed."""

        node.value, successor.value = successor.value, node.value
        if node.linked:
            self._post_exchange_values(node, successor)

    def _predecessor_internal(self, node: Node[T]) -> Optional[Node[T]]:
        if node.left is not None:
            result = node.left
            while result.right is not None:
                result = result.right
            return result
        parent = node.parent
        while parent is not None and node is parent.left:
            node = parent
            parent = parent.parent
        return parent

    def _successor_internal(self, node: Node[T]) -> Optional[Node[T]]:
        if node.right is not None:
            result = node.right
            while result.left is not None:
                result = result.left
            return result
        parent = node.parent
        while parent is not None and node is parent.right:
            node = parent
            parent = parent.parent
        return parent

    def _post_insert(self, node: LinkedNode[T]) -> None:
        predecessor = self._predecessor_internal(node)
        node.predecessor = predecessor
        if predecessor is not None:
            predecessor.successor = node
        successor = self._successor_internal(node)
        node.successor = successor
        if successor is not None:
            successor.predecessor = node

    def _post_delete(self, node: LinkedNode[T]) -> None:
        if node.predecessor is not None:
            node.predecessor.successor = node.successor
        if node.successor is not None:
            node.successor.predecessor = node.predecessor
        node.predecessor = node.successor = None

    def _post_exchange_values(self, node: LinkedNode[T], successor: LinkedNode[T]) -> None:
        node.successor = successor.successor
        if node.successor is not None:
            node.successor.predecessor = node
        successor.predecessor = successor.successor = None

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, linked={self.linked})"


OrderedSet = RedBlackTree
