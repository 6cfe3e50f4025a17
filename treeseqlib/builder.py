"""
Build a tree sequence by splicing lineages from left to right along the genome.
"""

import logging
import types

from .exceptions import BuilderFinalizedError
from .exceptions import DanglingTransplantError
from .exceptions import OpenEdgeError
from .treesequence import TreeSequence
from .util import check_int


class TreeSequenceBuilder:
    """
    Construct a :class:`TreeSequence` from a sequence of lineage operations.
    The builder keeps a genomic cursor (set by :meth:`breakpoint`) and, for each
    child, at most one open edge, which is closed at the cursor when the child
    is transplanted, or at the sequence length when :meth:`end` is called.
    Each operation returns the builder itself, so that calls can be chained:

        >>> ts = (
        ...     TreeSequenceBuilder()
        ...     .insert([0, 1], 2)
        ...     .breakpoint(5)
        ...     .transplant([1], None)
        ...     .end(10)
        ... )

    :param bool strict: If True, raise an :class:`OpenEdgeError` when inserting
        a child that already has an open edge, and a
        :class:`DanglingTransplantError` when transplanting a child without an
        open edge. Otherwise, inserting replaces the open edge (closing it at the
        cursor) and transplanting simply opens the new edge.
    """

    def __init__(self, strict=False):
        self.strict = strict
        self._ts = TreeSequence()
        self._last_breakpoint = 0
        self._open_edges = {}  # child -> (parent, left)

    def _check_open(self):
        if self._ts is None:
            raise BuilderFinalizedError("TreeSequenceBuilder has already been finalized")

    @property
    def position(self):
        """
        The current genomic cursor
        """
        return self._last_breakpoint

    @property
    def open_edges(self):
        """
        A read-only mapping of child ID to the ``(parent, left)`` of its open edge
        """
        return types.MappingProxyType(dict(self._open_edges))

    def _close(self, child, right):
        parent, left = self._open_edges.pop(child)
        if left == right:
            logging.debug(f"Dropping zero-length edge for child {child} at {left}")
            return
        self._ts.add_edge(left, right, child=child, parent=parent)

    def insert(self, children, parent):
        """
        Open a new edge from each child to ``parent``, starting at the cursor.
        """
        self._check_open()
        parent = check_int(parent, "parent")
        children = [check_int(c, "child") for c in children]
        if self.strict:
            if len(set(children)) != len(children):
                raise OpenEdgeError(f"Cannot insert the same child more than once: {children}")
            for c in children:
                if c in self._open_edges:
                    raise OpenEdgeError(
                        f"Child {c} already has an open edge to {self._open_edges[c][0]}; "
                        "use transplant() to change its parent"
                    )
        for c in children:
            if c in self._open_edges:
                logging.warning(
                    f"Child {c} already has an open edge to {self._open_edges[c][0]}: "
                    f"closing it at {self._last_breakpoint}"
                )
                self._close(c, self._last_breakpoint)
            self._open_edges[c] = (parent, self._last_breakpoint)
        return self

    def breakpoint(self, position):
        """
        Move the cursor to ``position``, which must not be to the left of the
        current cursor. Does not open or close any edges.
        """
        self._check_open()
        position = check_int(position, "position")
        if position < self._last_breakpoint:
            raise ValueError(f"Breakpoint {position} is to the left of the current position {self._last_breakpoint}")
        self._last_breakpoint = position
        return self

    def transplant(self, children, new_parent=None):
        """
        Close the open edge of each child at the cursor, then (unless
        ``new_parent`` is None) open a new edge from the child to ``new_parent``.
        A child with no new parent is a root until it is re-inserted.
        """
        self._check_open()
        if new_parent is not None:
            new_parent = check_int(new_parent, "new_parent")
        children = [check_int(c, "child") for c in children]
        if self.strict:
            for c in children:
                if c not in self._open_edges:
                    raise DanglingTransplantError(f"Can't transplant child node {c} which has no open edge")
        for c in children:
            if c in self._open_edges:
                self._close(c, self._last_breakpoint)
            else:
                logging.debug(f"Transplanting child {c} with no open edge at {self._last_breakpoint}")
            if new_parent is not None:
                self._open_edges[c] = (new_parent, self._last_breakpoint)
        return self

    def samples(self, ids):
        """
        Flag the given nodes as samples in the resulting tree sequence
        """
        self._check_open()
        self._ts.mark_samples(ids)
        return self

    def end(self, sequence_length):
        """
        Close all open edges at ``sequence_length`` and return the finished,
        frozen :class:`TreeSequence`. The builder cannot be used afterwards.
        """
        self._check_open()
        sequence_length = check_int(sequence_length, "sequence_length")
        if sequence_length < self._last_breakpoint:
            raise ValueError(
                f"Sequence length {sequence_length} is to the left of the current "
                f"position {self._last_breakpoint}"
            )
        for child in list(self._open_edges):
            self._close(child, sequence_length)
        ts = self._ts
        ts.set_sequence_length(max(sequence_length, ts.sequence_length))
        ts.freeze()
        self._ts = None
        logging.debug(f"Built tree sequence with {ts.num_edges} edges over {ts.num_nodes} nodes")
        return ts
