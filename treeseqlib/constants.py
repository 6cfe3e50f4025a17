from enum import IntFlag, auto

import tskit


class Const:
    NODE_IS_SAMPLE = tskit.NODE_IS_SAMPLE

    #: The default NULL integer value, identical to :data:`tskit:tskit.NULL`
    NULL = tskit.NULL


class ValidFlags(IntFlag):
    r"""
    Flags recording which guarantees hold for the edges of a
    :class:`TreeSequence`. Those starting with ``EDGES\_`` are specific to
    the edge table.
    """

    #: If set, edges are guaranteed to be sorted by (left, parent, child)
    EDGES_SORTED = auto()

    #: If set, no two edges share the same (left, parent, child) key
    EDGES_NO_DUPLICATES = auto()

    #: Set if ``left`` < ``right`` for every edge
    EDGES_CHILD_INTERVAL_POSITIVE = auto()

    #: IF set, each genomic position in a child is guaranteed to have
    #: at most one parent
    EDGES_FOR_CHILD_NONOVERLAPPING = auto()

    # Guaranteed by the edge table itself, whatever edges are added
    EDGES_COMBO_STANDALONE = EDGES_SORTED | EDGES_NO_DUPLICATES | EDGES_CHILD_INTERVAL_POSITIVE

    EDGES_ALL = EDGES_COMBO_STANDALONE | EDGES_FOR_CHILD_NONOVERLAPPING

    NONE = 0

    @classmethod
    def edges_combo_standalone_iter(cls):
        yield cls.EDGES_SORTED
        yield cls.EDGES_NO_DUPLICATES
        yield cls.EDGES_CHILD_INTERVAL_POSITIVE
