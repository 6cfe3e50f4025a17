"""
Exceptions raised when building or querying tree sequences.
"""


class TreeSequenceError(Exception):
    """
    Base class for the errors specific to this library.
    """


class DuplicateEdgeError(TreeSequenceError, ValueError):
    """
    An edge with the same (left, parent, child) key is already stored.
    """


class OpenEdgeError(TreeSequenceError, ValueError):
    """
    A strict builder was asked to open a second edge above a child.
    """


class DanglingTransplantError(TreeSequenceError, ValueError):
    """
    A strict builder was asked to transplant a child with no open edge.
    """


class BuilderFinalizedError(TreeSequenceError, RuntimeError):
    """
    The builder has already been finalized by ``end()``.
    """
