#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

An ordered dictionary backed by a **Red‑Black** tree.  Keys must be unique and
totally ordered; every insert, removal and lookup is O(log n).

Features
~~~~~~~~
* `tree.insert(key, value)` – add a new key (DuplicateKeyError if present)
* `tree.remove(key)`        – delete a key (KeyNotFoundError if missing)
* `tree.search(key)`        – ``(key, value)`` or ``None``
* `tree.inorder()`          – keys in ascending order, lazily
* `tree[key]`, `tree[key] = value`, `del tree[key]`, `key in tree`, `len(tree)`
* `tree.items()`, `tree.keys()`, `tree.values()`
* `tree.min_key()`, `tree.max_key()`
* `tree.validate()` – sanity‑check that the red‑black invariants hold

All leaves are represented by **one nil sentinel per tree** (``self._nil``),
which is BLACK and answers ``is_nil``.  Structural work (descent, rotations,
splicing a node out) lives on the node; the tree only drives the two fix‑up
state machines and keeps its root pointer current.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> rbt = RedBlackTree()
>>> for k in (10, 20, 30):
...     rbt.insert(k)
>>> list(rbt.inorder())
[10, 20, 30]
>>> rbt.search(20)
(20, None)
>>> rbt.remove(20)
>>> rbt.search(20) is None
True
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    Generator,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Type variables (keys must be comparable, values may be anything)
# ----------------------------------------------------------------------
K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Node colour constants – using simple booleans is fastest
# ----------------------------------------------------------------------
RED = True
BLACK = False


# ----------------------------------------------------------------------
#  Errors
# ----------------------------------------------------------------------
class RedBlackTreeError(Exception):
    """Base class for the errors raised by :class:`RedBlackTree`."""


class DuplicateKeyError(RedBlackTreeError, ValueError):
    """The key is already stored in the tree; nothing was changed."""

    def __init__(self, key: Any) -> None:
        super().__init__(f"Already inserted: {key!r}")
        self.key = key


class KeyNotFoundError(RedBlackTreeError, KeyError):
    """The key is not stored in the tree; nothing was changed."""

    def __init__(self, key: Any = None, message: Optional[str] = None) -> None:
        super().__init__(key if message is None else message)
        self.key = key


class _Node(Generic[K, V]):
    """Internal node object – not meant to be used directly by callers."""

    __slots__ = ("key", "value", "color", "left", "right", "parent")

    is_nil = False

    def __init__(
        self,
        key: Optional[K] = None,
        value: Optional[V] = None,
        color: bool = BLACK,
        left: Optional["_Node[K, V]"] = None,
        right: Optional["_Node[K, V]"] = None,
        parent: Optional["_Node[K, V]"] = None,
    ) -> None:
        self.key = key
        self.value = value
        self.color = color
        self.left = left
        self.right = right
        self.parent = parent

    def __repr__(self) -> str:
        col = "R" if self.color == RED else "B"
        return f"<{col} {self.key!r}:{self.value!r}>"

    # ------------------------------------------------------------------
    #   Descent
    # ------------------------------------------------------------------
    def insert(self, key: K, value: Optional[V] = None) -> "_Node[K, V]":
        """
        Attach *key* as a new RED leaf somewhere below this node.

        Walks down by comparison until the matching nil slot is found and
        returns the freshly created node, which the tree needs to start the
        fix‑up.  Raises ``DuplicateKeyError`` (without touching anything) if
        the key is already present.
        """
        cur = self
        while True:
            if key == cur.key:
                raise DuplicateKeyError(key)
            slot = cur.left if key < cur.key else cur.right
            if not slot.is_nil:
                cur = slot
                continue
            # `slot` is the sentinel: it becomes both children of the new leaf.
            leaf = _Node(key, value, RED, left=slot, right=slot, parent=cur)
            if key < cur.key:
                cur.left = leaf
            else:
                cur.right = leaf
            return leaf

    def minimum(self) -> "_Node[K, V]":
        """Return the left‑most node of the subtree rooted here."""
        node = self
        while not node.left.is_nil:
            node = node.left
        return node

    def maximum(self) -> "_Node[K, V]":
        """Return the right‑most node of the subtree rooted here."""
        node = self
        while not node.right.is_nil:
            node = node.right
        return node

    # ------------------------------------------------------------------
    #   Local structural queries
    # ------------------------------------------------------------------
    def is_left_son(self) -> bool:
        if self.parent is None or self.parent.is_nil:
            return False
        return self.parent.left is self

    def is_right_son(self) -> bool:
        if self.parent is None or self.parent.is_nil:
            return False
        return self.parent.right is self

    def sibling(self) -> Optional["_Node[K, V]"]:
        """The other child of our parent (possibly nil), or ``None`` for the root."""
        if self.is_left_son():
            return self.parent.right
        if self.is_right_son():
            return self.parent.left
        return None

    def uncle(self) -> Optional["_Node[K, V]"]:
        """The sibling of our parent, or ``None`` when there is no grandparent."""
        if self.parent is None or self.parent.is_nil:
            return None
        return self.parent.sibling()

    # ------------------------------------------------------------------
    #   Left / right rotations – the only shape‑changing primitives
    # ------------------------------------------------------------------
    def rotate_left(self) -> Optional["_Node[K, V]"]:
        """
        Left‑rotate the subtree rooted here and return the promoted node.

        The former parent's child slot is re‑pointed as well; when this node
        was the root the promoted node ends up with the nil parent and the
        caller must adopt it as the new root.  No‑op if the right child is nil.
        """
        pivot = self.right
        if pivot.is_nil:
            return None
        # Turn pivot's left subtree into our right subtree
        self.right = pivot.left
        if not pivot.left.is_nil:
            pivot.left.parent = self
        # Link our parent to pivot
        if self.is_left_son():
            self.parent.left = pivot
        elif self.is_right_son():
            self.parent.right = pivot
        pivot.parent = self.parent
        # Put ourselves on pivot's left
        pivot.left = self
        self.parent = pivot
        return pivot

    def rotate_right(self) -> Optional["_Node[K, V]"]:
        """Mirror of :meth:`rotate_left`.  No‑op if the left child is nil."""
        pivot = self.left
        if pivot.is_nil:
            return None
        self.left = pivot.right
        if not pivot.right.is_nil:
            pivot.right.parent = self
        if self.is_left_son():
            self.parent.left = pivot
        elif self.is_right_son():
            self.parent.right = pivot
        pivot.parent = self.parent
        pivot.right = self
        self.parent = pivot
        return pivot

    # ------------------------------------------------------------------
    #   Splicing
    # ------------------------------------------------------------------
    def replace_node(self, other: "_Node[K, V]") -> None:
        """
        Put *other* in the position this node occupies.

        Our parent's left or right pointer (whichever side we are on) is
        re‑pointed to *other*, and *other* inherits our parent link, even when
        *other* is the nil sentinel; the delete fix‑up walks up from it.  If
        we are the root, *other* gets our (nil) parent and the tree must
        adopt it as its root.
        """
        if self.is_left_son():
            self.parent.left = other
        elif self.is_right_son():
            self.parent.right = other
        other.parent = self.parent


class _NilNode(_Node[K, V]):
    """The BLACK leaf sentinel shared by every leaf position of one tree."""

    __slots__ = ()

    is_nil = True

    def __init__(self) -> None:
        super().__init__(color=BLACK)
        self.left = self.right = self.parent = self

    def __repr__(self) -> str:
        return "<nil>"


class RedBlackTree(Generic[K, V]):
    """
    An ordered mapping implemented with a red‑black binary search tree.

    ``insert`` / ``remove`` / ``search`` / ``inorder`` form the core API.  The
    ``dict``‑like protocol (``__getitem__``, ``__setitem__``, ``__delitem__``,
    ``__contains__``, ``__len__``, ``__iter__``) is layered on top of it.

    The tree is not thread‑safe; callers that share one must serialize
    mutations themselves.
    """

    __slots__ = ("_root", "_nil", "_size")

    # ------------------------------------------------------------------
    #   Construction / basic container protocol
    # ------------------------------------------------------------------
    def __init__(self, items: Optional[Iterable[Tuple[K, V]]] = None) -> None:
        """
        Create an empty tree or optionally initialise it from an iterable of
        ``(key, value)`` pairs.

        Parameters
        ----------
        items : iterable of (key, value)   optional
            Each pair is inserted with ``insert``, so a repeated key raises
            ``DuplicateKeyError``.
        """
        self._nil: _NilNode[K, V] = _NilNode()
        self._root: _Node[K, V] = self._nil
        self._size: int = 0

        if items is not None:
            for key, value in items:
                self.insert(key, value)

    # ------------------------------------------------------------------
    #   Helper look‑up (internal)
    # ------------------------------------------------------------------
    def _search_node(self, key: K) -> _Node[K, V]:
        """Return the node that holds *key* or the sentinel `_nil` if not found."""
        cur = self._root
        while not cur.is_nil:
            if key == cur.key:
                return cur
            elif key < cur.key:
                cur = cur.left
            else:
                cur = cur.right
        return self._nil

    # ------------------------------------------------------------------
    #   Core public API
    # ------------------------------------------------------------------
    def insert(self, key: K, value: Optional[V] = None) -> None:
        """
        Add *key* (with an optional *value*).

        Raises ``DuplicateKeyError`` if the key is already stored; the tree
        is left exactly as it was.
        """
        if self._root.is_nil:
            node = _Node(key, value, RED, left=self._nil, right=self._nil,
                         parent=self._nil)
            self._root = node
        else:
            node = self._root.insert(key, value)
        self._size += 1
        self._fix_insert(node)

    def remove(self, key: K) -> None:
        """
        Delete *key* from the tree.

        Raises ``KeyNotFoundError`` if the key is absent; nothing is mutated
        in that case.
        """
        node = self._search_node(key)
        if node.is_nil:
            raise KeyNotFoundError(key)
        self._delete_node(node)

    def search(self, key: K) -> Optional[Tuple[K, V]]:
        """Return the stored ``(key, value)`` pair, or ``None`` if *key* is absent."""
        node = self._search_node(key)
        if node.is_nil:
            return None
        return node.key, node.value  # type: ignore[return-value]

    def inorder(self) -> Generator[K, None, None]:
        """Yield keys in ascending order (in‑order traversal)."""
        stack: List[_Node[K, V]] = []
        cur: _Node[K, V] = self._root
        while stack or not cur.is_nil:
            while not cur.is_nil:
                stack.append(cur)
                cur = cur.left
            cur = stack.pop()
            yield cur.key  # type: ignore[misc]
            cur = cur.right

    # ------------------------------------------------------------------
    #   Mapping protocol
    # ------------------------------------------------------------------
    def __contains__(self, key: object) -> bool:
        return not self._search_node(key).is_nil  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, key: K) -> V:
        node = self._search_node(key)
        if node.is_nil:
            raise KeyNotFoundError(key)
        return node.value  # type: ignore[return-value]

    def __setitem__(self, key: K, value: V) -> None:
        """Insert *key* with *value* or replace the value of an existing key."""
        node = self._search_node(key)
        if node.is_nil:
            self.insert(key, value)
        else:
            # Key already exists → replace value, no tree‑structure change.
            node.value = value

    def __delitem__(self, key: K) -> None:
        self.remove(key)

    def __iter__(self) -> Generator[K, None, None]:
        return self.inorder()

    def keys(self) -> List[K]:
        """Return a list of all keys in sorted order."""
        return list(self.inorder())

    def values(self) -> List[V]:
        """Return a list of all values in key order."""
        return [self[key] for key in self.inorder()]

    def items(self) -> List[Tuple[K, V]]:
        """Return a list of ``(key, value)`` pairs in sorted order."""
        return [(key, self[key]) for key in self.inorder()]

    def min_key(self) -> K:
        """Return the smallest key stored in the tree."""
        if self._root.is_nil:
            raise KeyNotFoundError(message="min_key() on an empty tree")
        return self._root.minimum().key  # type: ignore[return-value]

    def max_key(self) -> K:
        """Return the largest key stored in the tree."""
        if self._root.is_nil:
            raise KeyNotFoundError(message="max_key() on an empty tree")
        return self._root.maximum().key  # type: ignore[return-value]

    # ------------------------------------------------------------------
    #   Rotations – keep the root pointer current
    # ------------------------------------------------------------------
    def _rotate_left(self, node: _Node[K, V]) -> None:
        pivot = node.rotate_left()
        if pivot is not None and pivot.parent.is_nil:
            self._root = pivot

    def _rotate_right(self, node: _Node[K, V]) -> None:
        pivot = node.rotate_right()
        if pivot is not None and pivot.parent.is_nil:
            self._root = pivot

    # ------------------------------------------------------------------
    #   Insert fix‑up (preserves red‑black properties)
    # ------------------------------------------------------------------
    def _fix_insert(self, node: _Node[K, V]) -> None:
        """Restore red‑black properties after inserting `node` (which is RED)."""
        while True:
            parent = node.parent
            if parent.is_nil:
                # Case 1 – node is the root
                logger.debug("insert case 1: %r becomes a black root", node)
                node.color = BLACK
                return
            if parent.color == BLACK:
                # Case 2 – nothing to repair
                logger.debug("insert case 2: %r has a black parent", node)
                return

            uncle = node.uncle()
            grandparent = parent.parent
            if uncle.color == RED:
                # Case 3 – recolour and push the violation up
                logger.debug("insert case 3: recolour around %r", grandparent)
                parent.color = BLACK
                uncle.color = BLACK
                grandparent.color = RED
                node = grandparent
                continue

            if parent.is_left_son() and node.is_right_son():
                # Case 4 – zig‑zag, straighten it out
                logger.debug("insert case 4: rotate %r left", parent)
                self._rotate_left(parent)
                node, parent = parent, node
            elif parent.is_right_son() and node.is_left_son():
                logger.debug("insert case 4: rotate %r right", parent)
                self._rotate_right(parent)
                node, parent = parent, node

            # Case 5 – straight line, rotate the grandparent away
            logger.debug("insert case 5: rotate %r", grandparent)
            parent.color = BLACK
            grandparent.color = RED
            if node.is_left_son():
                self._rotate_right(grandparent)
            else:
                self._rotate_left(grandparent)
            return

    # ------------------------------------------------------------------
    #   Deletion
    # ------------------------------------------------------------------
    def _delete_node(self, node: _Node[K, V]) -> None:
        """Splice `node` out of the tree and fix up any colour violations."""
        if not node.left.is_nil and not node.right.is_nil:
            # Two children: take over the in‑order successor's payload and
            # delete the successor, which has no left child.
            successor = node.right.minimum()
            logger.debug("remove: %r absorbs successor %r", node, successor)
            node.key, node.value = successor.key, successor.value
            node = successor

        child = node.right if node.left.is_nil else node.left
        node.replace_node(child)
        if child.parent.is_nil:
            self._root = child
        self._size -= 1
        logger.debug("remove: spliced out %r, replaced by %r", node, child)

        if node.color == BLACK:
            if child.color == RED:
                # One black removed, one red turned black – heights unchanged.
                child.color = BLACK
            else:
                self._fix_delete(child)

        # The sentinel and the detached node must not reference the tree.
        self._nil.parent = self._nil
        node.left = node.right = node.parent = self._nil

    def _fix_delete(self, node: _Node[K, V]) -> None:
        """
        Resolve the "double black" deficit carried by `node`.

        `node` took the removed black node's place (it may be the sentinel,
        whose parent link was set by the splice).  Each pass either settles
        the deficit or moves it one level closer to the root.
        """
        while True:
            if node is self._root:
                # Case 1 – deficit absorbed at the root
                logger.debug("delete case 1: deficit reached the root")
                return

            parent = node.parent
            on_left = node is parent.left
            sibling = parent.right if on_left else parent.left

            if sibling.color == RED:
                # Case 2 – red sibling, rotate it above the parent
                logger.debug("delete case 2: red sibling %r", sibling)
                sibling.color = BLACK
                parent.color = RED
                if on_left:
                    self._rotate_left(parent)
                else:
                    self._rotate_right(parent)
                sibling = parent.right if on_left else parent.left

            near = sibling.left if on_left else sibling.right
            far = sibling.right if on_left else sibling.left
            if near.color == BLACK and far.color == BLACK:
                if parent.color == BLACK:
                    # Case 3 – everything black, push the deficit up
                    logger.debug("delete case 3: recolour %r, move up", sibling)
                    sibling.color = RED
                    node = parent
                    continue
                # Case 4 – red parent absorbs the deficit
                logger.debug("delete case 4: swap colours of %r and %r",
                             parent, sibling)
                sibling.color = RED
                parent.color = BLACK
                return

            if far.color == BLACK:
                # Case 5 – near nephew red, rotate it into the far position
                logger.debug("delete case 5: rotate sibling %r", sibling)
                sibling.color = RED
                near.color = BLACK
                if on_left:
                    self._rotate_right(sibling)
                else:
                    self._rotate_left(sibling)
                sibling = parent.right if on_left else parent.left
                far = sibling.right if on_left else sibling.left

            # Case 6 – far nephew red, final rotation
            logger.debug("delete case 6: rotate parent %r", parent)
            sibling.color = parent.color
            parent.color = BLACK
            far.color = BLACK
            if on_left:
                self._rotate_left(parent)
            else:
                self._rotate_right(parent)
            return

    # ------------------------------------------------------------------
    #   Validation/checking utilities – useful for debugging
    # ------------------------------------------------------------------
    def height(self) -> int:
        """Number of nodes on the longest root‑to‑leaf path (0 when empty)."""

        def depth(node: _Node[K, V]) -> int:
            if node.is_nil:
                return 0
            return 1 + max(depth(node.left), depth(node.right))

        return depth(self._root)

    def black_height(self) -> int:
        """Black nodes from the root down to a nil leaf, root excluded, leaf included."""
        if self._root.is_nil:
            return 0
        count = 0
        node = self._root.left
        while True:
            if node.color == BLACK:
                count += 1
            if node.is_nil:
                return count
            node = node.left

    def validate(self) -> None:
        """
        Verify that the tree satisfies all red‑black invariants.
        Raises ``AssertionError`` with a descriptive message if something is broken.
        """

        def dfs(node: _Node[K, V], lo: Any, hi: Any) -> Tuple[int, int]:
            """Return ``(black_height, node_count)`` of the subtree at *node*."""
            if node.is_nil:
                return 1, 0  # leaves count as black height 1 (they are black)

            # Property 3: red nodes have black children
            if node.color == RED:
                assert node.left.color == BLACK, "Red node has red left child"
                assert node.right.color == BLACK, "Red node has red right child"

            # Property 1: BST ordering against every ancestor bound
            if lo is not None:
                assert lo < node.key, "BST property violated (key too small)"
            if hi is not None:
                assert node.key < hi, "BST property violated (key too large)"

            # Parent links must mirror child links
            if not node.left.is_nil:
                assert node.left.parent is node, "Left child has a stale parent"
            if not node.right.is_nil:
                assert node.right.parent is node, "Right child has a stale parent"

            left_black, left_count = dfs(node.left, lo, node.key)
            right_black, right_count = dfs(node.right, node.key, hi)

            # Property 4: all paths have the same black height
            assert left_black == right_black, "Black-height mismatch"

            bh = left_black + (1 if node.color == BLACK else 0)
            return bh, left_count + right_count + 1

        assert self._nil.color == BLACK, "Nil sentinel is not black"
        assert self._nil.parent is self._nil, "Nil sentinel holds a stale parent"
        if self._root.is_nil:
            assert self._size == 0, "Empty tree reports a non-zero size"
            return

        # Property 2: root is black
        assert self._root.color == BLACK, "Root is not black"
        assert self._root.parent.is_nil, "Root has a parent"
        _, count = dfs(self._root, None, None)
        assert count == self._size, "Size bookkeeping is out of sync"

    # ------------------------------------------------------------------
    #   Convenience string representation (for debugging)
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"RedBlackTree({{{items}}})"
