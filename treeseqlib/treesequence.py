"""
Define a tree sequence object: a sorted, duplicate-free set of edges from
which the local trees along a genome can be reconstructed.
"""

import json
import logging
from collections import namedtuple

import numpy as np
import portion as P
import sortedcontainers
import tskit

from .constants import Const, ValidFlags
from .tables import EdgeTable
from .trees import StreamingTreeIterator, TreeSequenceIterator, _EdgeSweep
from .util import check_int

NULL = Const.NULL


class TreeSequence:
    """
    This is similar to a _tskit_ :class:`~tskit:tskit.TreeSequence`, but only
    records topology. A tree sequence can be built edge-by-edge using
    :meth:`add_edge`, or (more safely) using a :class:`TreeSequenceBuilder`,
    which returns a frozen tree sequence.
    """

    def __init__(self):
        self._frozen = False
        self._edges = EdgeTable()
        self._num_nodes = 0
        self._sequence_length = 0
        self._sample_ids = sortedcontainers.SortedSet()
        self._flags = ValidFlags.EDGES_ALL

    def __setattr__(self, attr, value):
        if getattr(self, "_frozen", False):
            raise AttributeError("Trying to set attribute on a frozen instance")
        return super().__setattr__(attr, value)

    def __eq__(self, other):
        if not isinstance(other, TreeSequence):
            return NotImplemented
        return (
            self._num_nodes == other._num_nodes
            and self._sample_ids == other._sample_ids
            and self._edges == other._edges
        )

    def __str__(self):
        return "\n\n".join(
            [
                f"== TREE SEQUENCE: {self.num_nodes} nodes, "
                f"sequence length {self.sequence_length} ==",
                "== EDGES ==\n" + str(self._edges),
            ]
        )

    def _repr_html_(self):
        return self._edges._repr_html_()

    @property
    def edges(self):
        """
        The :class:`EdgeTable` of this tree sequence. The returned table is
        always frozen: while the tree sequence is unfrozen it is a frozen copy,
        so new edges must be added with :meth:`add_edge`.
        """
        if self._frozen:
            return self._edges
        edges = self._edges.copy()
        edges.freeze()
        return edges

    @property
    def frozen(self):
        return self._frozen

    @property
    def num_nodes(self):
        return self._num_nodes

    @property
    def num_edges(self):
        return len(self._edges)

    @property
    def num_samples(self):
        return len(self._sample_ids)

    @property
    def sequence_length(self):
        return self._sequence_length

    @property
    def flags(self):
        return self._flags

    def has_bitflag(self, flag):
        return bool(self._flags & flag)

    def add_edge(self, left, right, *, child, parent):
        """
        Add an edge recording that ``parent`` is the parent of ``child`` over
        ``[left, right)``. The edge is inserted at its sorted position.

        :raises DuplicateEdgeError: if an edge with the same ``left``,
            ``parent`` and ``child`` already exists
        :return: The row ID of the new edge
        """
        if self._frozen:
            raise AttributeError("Trying to add an edge to a frozen TreeSequence")
        row_id = self._edges.add_row(left, right, parent=parent, child=child)
        edge = self._edges[row_id]
        self._num_nodes = max(self._num_nodes, edge.child + 1, edge.parent + 1)
        self._sequence_length = max(self._sequence_length, edge.right)
        # Can't tell cheaply whether this overlaps another edge for the child
        self._flags &= ~ValidFlags.EDGES_FOR_CHILD_NONOVERLAPPING
        return row_id

    def set_sequence_length(self, sequence_length):
        """
        Extend the sequence length. The sequence length can never be set
        lower than the rightmost edge coordinate.
        """
        sequence_length = check_int(sequence_length, "sequence_length")
        if sequence_length < self._edges.max_right():
            raise ValueError(
                f"Sequence length {sequence_length} is less than the rightmost edge "
                f"position {self._edges.max_right()}"
            )
        self._sequence_length = sequence_length

    def mark_samples(self, ids):
        """
        Flag the given nodes as samples. Nodes that are not samples are treated
        as inferred ancestors.
        """
        if self._frozen:
            raise AttributeError("Trying to mark samples in a frozen TreeSequence")
        for u in ids:
            u = check_int(u, "sample ID")
            self._sample_ids.add(u)
            self._num_nodes = max(self._num_nodes, u + 1)

    def samples(self):
        """
        Return the IDs of all sample nodes
        """
        return np.array(list(self._sample_ids), dtype=np.int32)

    @property
    def nodes(self):
        """
        Return an object used to iterate over the nodes in this tree sequence
        """
        return NodeIterator(self)

    def freeze(self):
        """
        Freeze the tree sequence so that it cannot be modified, checking which
        validity guarantees hold. Freezing an already frozen tree sequence
        has no effect.
        """
        if self._frozen:
            return
        if self._find_child_overlap() is None:
            self._flags |= ValidFlags.EDGES_FOR_CHILD_NONOVERLAPPING
        else:
            logging.warning("Freezing a tree sequence in which a child has multiple parents")
        self._edges.freeze()
        self._frozen = True

    def _find_child_overlap(self):
        """
        Return the first (child, position) at which a child has more than one
        parent, or None if the edges above each child do not overlap
        """
        covered = {}
        for edge in self._edges:
            interval = P.closedopen(edge.left, edge.right)
            seen = covered.get(edge.child, P.empty())
            overlap = seen & interval
            if not overlap.empty:
                return edge.child, overlap.lower
            covered[edge.child] = seen | interval
        return None

    def validate(self):
        """
        Check that each genomic position in a child has at most one parent,
        raising a ``ValueError`` if not.
        """
        overlap = self._find_child_overlap()
        if overlap is not None:
            u, pos = overlap
            raise ValueError(f"Node {u} has multiple parents at position {pos}")
        if not self._frozen:
            self._flags |= ValidFlags.EDGES_FOR_CHILD_NONOVERLAPPING

    def trees(self):
        """
        Returns an iterator over the trees in this tree sequence. Each value
        returned is a new :class:`Tree`, so trees can be stored, e.g. by
        ``list(ts.trees())``. This freezes the tree sequence.
        """
        return TreeSequenceIterator(self)

    def streaming_trees(self):
        """
        Returns a :class:`StreamingTreeIterator` which updates a single
        :class:`Tree` in place. This freezes the tree sequence.

        Example:
            it = ts.streaming_trees()
            while it.next():
                print(it.tree)
        """
        return StreamingTreeIterator(self)

    def for_each_tree(self, func):
        """
        Call ``func(index, tree)`` for each tree in turn. The tree passed to
        ``func`` is only valid for the duration of the call.
        """
        iterator = self.streaming_trees()
        while iterator.next():
            func(iterator.index, iterator.tree)

    def first(self):
        """
        Returns the first tree in this tree sequence, or None if it has zero length
        """
        return next(self.trees(), None)

    @property
    def num_trees(self):
        iterator = self.streaming_trees()
        n = 0
        while iterator.next():
            n += 1
        return n

    def edge_diffs(self):
        """
        Returns an iterator over the edges that are removed and inserted to
        build the trees as we move from left-to-right along the tree sequence.
        The iterator yields a sequence of 3-tuples, ``(interval, edges_out,
        edges_in)``. ``edges_out`` is always empty for the first tree.
        """
        sweep = _EdgeSweep(self)
        while (diffs := sweep._step()) is not None:
            edges_out, edges_in = diffs
            yield sweep.interval, edges_out, edges_in

    def breakpoints(self):
        """
        Returns an iterator over the breakpoints along the chromosome,
        including the two extreme points 0 and L.
        """
        yield 0
        for interval, _, _ in self.edge_diffs():
            yield interval[1]

    @classmethod
    def from_tree_sequence(cls, ts):
        """
        Construct a (frozen) tree sequence from a tskit tree sequence. Node times,
        populations, sites and mutations are discarded, but sample flags are kept.

        :param tskit.TreeSequence ts: A tree sequence object with integer coordinates
        :return: A new tree sequence object
        :rtype: TreeSequence
        """
        new_ts = cls()
        for edge in ts.edges():
            new_ts.add_edge(
                check_int(edge.left, "left", convert=True),
                check_int(edge.right, "right", convert=True),
                child=edge.child,
                parent=edge.parent,
            )
        new_ts.mark_samples(ts.samples())
        new_ts._num_nodes = max(new_ts._num_nodes, ts.num_nodes)
        new_ts.set_sequence_length(check_int(ts.sequence_length, "sequence_length", convert=True))
        new_ts.freeze()
        return new_ts

    def _node_times(self):
        # Time of a node is the longest path down to a leaf: a topological sort
        # from the leaves upwards, using each distinct parent-child pair once
        pairs = {(e.parent, e.child) for e in self._edges}
        parents_of = [[] for _ in range(self.num_nodes)]
        num_children = np.zeros(self.num_nodes, dtype=np.int64)
        for p, c in pairs:
            parents_of[c].append(p)
            num_children[p] += 1
        times = np.zeros(self.num_nodes, dtype=np.float64)
        stack = [u for u in range(self.num_nodes) if num_children[u] == 0]
        visited = 0
        while len(stack) > 0:
            c = stack.pop()
            visited += 1
            for p in parents_of[c]:
                times[p] = max(times[p], times[c] + 1)
                num_children[p] -= 1
                if num_children[p] == 0:
                    stack.append(p)
        if visited != self.num_nodes:
            raise ValueError("Cannot assign node times: the parent graph contains a cycle")
        return times

    def to_tree_sequence(self):
        """
        Convert to a tskit tree sequence. As only topology is recorded, node
        times are set to the number of generations on the longest path down to
        a leaf node.
        """
        if self.sequence_length == 0:
            raise ValueError("Cannot convert a tree sequence of zero length to tskit")
        times = self._node_times()
        tables = tskit.TableCollection(self.sequence_length)
        for u in range(self.num_nodes):
            flags = Const.NODE_IS_SAMPLE if u in self._sample_ids else 0
            tables.nodes.add_row(time=times[u], flags=flags)
        for e in self._edges:
            tables.edges.add_row(left=e.left, right=e.right, parent=e.parent, child=e.child)
        tables.provenances.add_row(record=json.dumps({"parameters": {"command": "ts.to_tree_sequence"}}))
        tables.sort()
        return tables.tree_sequence()


class NodeIterator:
    """
    Class to help iterate over the nodes in a tree sequence. Since it has a
    __len__ method, it should play nicely with showing progressbar
    output with tqdm (e.g. for nd in tqdm.tqdm(ts.nodes): ...)
    """

    def __init__(self, ts):
        self.ts = ts

    def __getitem__(self, index):
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(f"Node {index} out of range")
        return self._node(index)

    def _node(self, u):
        flags = Const.NODE_IS_SAMPLE if u in self.ts._sample_ids else 0
        return Node(flags=flags, id=u)

    def __len__(self):
        return self.ts.num_nodes

    def __iter__(self):
        for u in range(len(self)):
            yield self._node(u)


class Node(namedtuple("Node", ("flags", "id"))):
    """
    An object representing a single node in a :class:`TreeSequence`: either a
    sample or an inferred ancestor.
    """

    def is_sample(self):
        return bool(self.flags & Const.NODE_IS_SAMPLE)
