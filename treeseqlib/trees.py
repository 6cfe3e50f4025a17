"""
Local trees, and the sweep-line iterators that build them from the edges
of a :class:`TreeSequence`.
"""

import logging

import numpy as np
import sortedcontainers

from .constants import Const, ValidFlags
from .util import check_int

NULL = Const.NULL


class Tree:
    """
    The parent-pointer forest valid over a single genomic interval. Node ``u``
    has parent ``tree.parent(u)``, which is :data:`NULL` if ``u`` is a root.

    A tree can be created directly from a list of parents, in which ``None`` or
    ``NULL`` denote a root:

        >>> t = Tree([None, 0, 0])
        >>> t.mrca(1, 2)
        0
    """

    def __init__(self, parent, *, interval=None, index=-1):
        self._parent = np.array(
            [NULL if p is None or p == NULL else check_int(p, "parent") for p in parent],
            dtype=np.int64,
        )
        self.interval = interval
        self.index = index

    @classmethod
    def _empty(cls, num_nodes):
        tree = cls.__new__(cls)
        tree._parent = np.full(num_nodes, NULL, dtype=np.int64)
        tree.interval = None
        tree.index = -1
        return tree

    @property
    def num_nodes(self):
        return len(self._parent)

    @property
    def parent_array(self):
        """
        A read-only view of the array of parents, indexed by node ID
        """
        view = self._parent.view()
        view.flags.writeable = False
        return view

    @property
    def left(self):
        return None if self.interval is None else self.interval[0]

    @property
    def right(self):
        return None if self.interval is None else self.interval[1]

    @property
    def span(self):
        if self.interval is None:
            return None
        return self.interval[1] - self.interval[0]

    @property
    def roots(self):
        """
        The nodes with at least one child but no parent in this tree
        """
        parents = self._parent[self._parent != NULL]
        return [int(u) for u in np.unique(parents) if self._parent[u] == NULL]

    def parent(self, u):
        """
        Return the parent of node ``u``, or :data:`NULL` if ``u`` is a root or
        lies outside the range of nodes known to this tree.
        """
        if 0 <= u < len(self._parent):
            return int(self._parent[u])
        return NULL

    def is_root(self, u):
        return self.parent(u) == NULL

    def _ancestor_chain(self, u):
        # Never empty: always starts with u itself
        chain = [u]
        p = self.parent(u)
        while p != NULL:
            if len(chain) > len(self._parent):
                raise ValueError(f"Cycle in parent pointers above node {u}")
            chain.append(p)
            p = self.parent(p)
        return chain

    def path_to_root(self, u):
        """
        Return the list ``[u, parent(u), parent(parent(u)), ...]`` ending at
        the root above ``u``.
        """
        return self._ancestor_chain(u)

    def depth(self, u):
        return len(self._ancestor_chain(u)) - 1

    def mrca(self, u, v):
        """
        Returns the most recent common ancestor of two nodes in the tree.
        :data:`NULL` is returned if the nodes do not share a common ancestor
        (they are under different roots).

        :param int u: The first node.
        :param int v: The second node.
        :return: The most recent common ancestor of u and v.
        :rtype: int
        """
        u_anc = self._ancestor_chain(u)
        v_anc = self._ancestor_chain(v)
        if u_anc[-1] != v_anc[-1]:
            return NULL
        # Walk down from the shared root until the chains diverge
        common_ancestor = u_anc[-1]
        for a, b in zip(reversed(u_anc), reversed(v_anc)):
            if a != b:
                break
            common_ancestor = a
        return common_ancestor

    def copy(self):
        tree = self._empty(len(self._parent))
        tree._parent[:] = self._parent
        tree.interval = self.interval
        tree.index = self.index
        return tree

    def __eq__(self, other):
        if not isinstance(other, Tree):
            return NotImplemented
        return np.array_equal(self._parent, other._parent)

    def __str__(self):
        parents = [None if p == NULL else int(p) for p in self._parent]
        return f"Tree {self.index} {self.interval}: {parents}"

    def __repr__(self):
        return f"Tree(parent={self._parent.tolist()}, interval={self.interval}, index={self.index})"


class _EdgeSweep:
    """
    Sweep along the genome, yielding the edges that leave and enter
    at each breakpoint. The edges are taken from a frozen tree sequence, so
    indexes into them stay valid for the lifetime of the sweep.
    """

    def __init__(self, ts):
        ts.freeze()
        self.num_nodes = ts.num_nodes
        self.sequence_length = ts.sequence_length
        self._edges = ts.edges
        self._next_edge = 0  # first edge not yet added
        self._active = sortedcontainers.SortedKeyList(key=lambda e: e.right)
        self._nonoverlapping = ts.has_bitflag(ValidFlags.EDGES_FOR_CHILD_NONOVERLAPPING)
        self._position = 0
        self.interval = None
        self.index = -1

    def _step(self):
        """
        Advance to the next breakpoint. Returns a tuple of ``(edges_out, edges_in)``
        or None if the sweep is exhausted
        """
        x = self._position
        if x >= self.sequence_length:
            self.interval = None
            return None
        edges_out = []
        while len(self._active) > 0 and self._active[0].right == x:
            edges_out.append(self._active.pop(0))
        edges_in = []
        num_edges = len(self._edges)
        while self._next_edge < num_edges and self._edges[self._next_edge].left == x:
            edge = self._edges[self._next_edge]
            edges_in.append(edge)
            self._active.add(edge)
            self._next_edge += 1

        right = self.sequence_length
        if len(self._active) > 0:
            right = min(right, self._active[0].right)
        if self._next_edge < num_edges:
            right = min(right, self._edges[self._next_edge].left)
        self.interval = (x, right)
        self._position = right
        self.index += 1
        logging.debug(
            f"Tree {self.index} at {self.interval}: {len(edges_out)} edges out, " f"{len(edges_in)} edges in"
        )
        return edges_out, edges_in


class TreeSequenceIterator(_EdgeSweep):
    """
    Iterate over the local trees of a tree sequence, building a new
    :class:`Tree` for each interval. The yielded trees are independent copies,
    so they can safely be stored.
    """

    def __iter__(self):
        return self

    def __next__(self):
        if self._step() is None:
            raise StopIteration
        tree = Tree._empty(self.num_nodes)
        for e in self._active:
            tree._parent[e.child] = e.parent
        tree.interval = self.interval
        tree.index = self.index
        return tree


class StreamingTreeIterator(_EdgeSweep):
    """
    Iterate over the local trees of a tree sequence by updating a single
    :class:`Tree` in place. Call :meth:`next` to advance, then read
    :attr:`tree`.

    .. warning::
        The same :class:`Tree` object is returned at each step. It is only
        valid until the next call to :meth:`next`: to keep a tree, store
        ``tree.copy()``.
    """

    def __init__(self, ts):
        super().__init__(ts)
        self._tree = Tree._empty(self.num_nodes)
        self._exhausted = False

    def next(self):
        """
        Move to the next tree, returning False if there are no more trees
        """
        if self._exhausted:
            return False
        diffs = self._step()
        if diffs is None:
            self._exhausted = True
            return False
        edges_out, edges_in = diffs
        parent = self._tree._parent
        if self._nonoverlapping:
            for e in edges_out:
                parent[e.child] = NULL
            for e in edges_in:
                parent[e.child] = e.parent
        else:
            # A child may still have other active edges: recompute its parent
            # from the active set in the same order as TreeSequenceIterator
            changed = {e.child for e in edges_out} | {e.child for e in edges_in}
            for u in changed:
                parent[u] = NULL
            for e in self._active:
                if e.child in changed:
                    parent[e.child] = e.parent
        self._tree.interval = self.interval
        self._tree.index = self.index
        return True

    @property
    def tree(self):
        """
        The current tree, or None before the first call to :meth:`next` and
        once the iterator is exhausted
        """
        if self._exhausted or self.index < 0:
            return None
        return self._tree

    def __iter__(self):
        while self.next():
            yield self._tree
