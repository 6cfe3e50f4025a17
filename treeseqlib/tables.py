import dataclasses

import numpy as np
import numpy.typing as npt
import pandas as pd
import sortedcontainers
import tskit

from .constants import ValidFlags
from .exceptions import DuplicateEdgeError
from .util import check_int
from .util import truncate_rows


@dataclasses.dataclass(frozen=True)
class TableRow:
    def asdict(self):
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class Edge(TableRow):
    """
    The record that ``child`` inherits from ``parent`` over the half-open
    genomic interval ``[left, right)``. Edges are ordered by :attr:`key`.
    """

    left: int
    right: int
    _: dataclasses.KW_ONLY
    parent: int
    child: int

    @property
    def key(self):
        """
        The sort key of this edge: ``(left, parent, child)``
        """
        return (self.left, self.parent, self.child)

    @property
    def span(self):
        return self.right - self.left

    def __lt__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return self.key < other.key


class BaseTable:
    RowClass = None
    _frozen = False

    def __getattr__(self, name):
        # Extract column by name
        if name.startswith("_") or name not in self.RowClass.__annotations__:
            raise AttributeError(name)
        return np.array([getattr(d, name) for d in self._data], dtype=np.int64)

    def __init__(self):
        self._data = []

    def freeze(self):
        """
        Freeze the table so that it cannot be modified
        """
        self._frozen = True

    @property
    def frozen(self):
        return self._frozen

    def __setattr__(self, attr, value):
        if self._frozen:
            raise AttributeError("Trying to set attribute on a frozen instance")
        return super().__setattr__(attr, value)

    def __eq__(self, other):
        if not isinstance(other, BaseTable):
            return NotImplemented
        return tuple(self._data) == tuple(other._data)

    def clear(self):
        """
        Deletes all rows in this table.
        """
        self._data = []

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def __str__(self):
        headers, rows = self._text_header_and_rows(limit=20)
        unicode = tskit.util.unicode_table(rows, header=headers, row_separator=False)
        # hack to change hardcoded package name
        newstr = []
        linelen_unicode = unicode.find("\n")
        assert linelen_unicode != -1
        for line in unicode.split("\n"):
            if "skipped (tskit" in line:
                line = line.replace("skipped (tskit", f"skipped ({__package__}")
                if len(line) > linelen_unicode:
                    line = line[: linelen_unicode - 1] + line[-1]
            newstr.append(line)
        return "\n".join(newstr)

    def _repr_html_(self):
        """
        Called e.g. by jupyter notebooks to render tables
        """
        from . import _print_options  # pylint: disable=import-outside-toplevel

        headers, rows = self._text_header_and_rows(limit=_print_options["max_lines"])
        html = tskit.util.html_table(rows, header=headers)
        return html.replace("tskit.set_print_options", f"{__package__}.set_print_options")

    def _text_header_and_rows(self, limit=None):
        headers = ("id",)
        headers += tuple(k for k in self.RowClass.__annotations__.keys() if k != "_")
        rows = []
        row_indexes = truncate_rows(len(self), limit)
        for j in row_indexes:
            if j == -1:
                rows.append(f"__skipped__{len(self) - limit}")
            else:
                row = self[j]
                rows.append([str(j)] + [f"{x}" for x in dataclasses.asdict(row).values()])
        return headers, rows

    def _df(self):
        """
        Temporary hack to convert the table to a Pandas dataframe.
        Shouldn't be used for anything besides exploratory work!
        """
        return pd.DataFrame([dataclasses.asdict(row) for row in self._data])


class EdgeTable(BaseTable):
    """
    A table of edges, always kept sorted by ``(left, parent, child)``. Unlike
    a tskit edge table, rows cannot be added out of order: each new edge is
    inserted at its sort position, and an edge whose key is already present
    is rejected.
    """

    RowClass = Edge

    def __init__(self):
        super().__init__()
        self.clear()

    def clear(self):
        """
        Deletes all rows in this table.
        """
        if self._frozen:
            raise AttributeError("Trying to clear a frozen table")
        self._data = sortedcontainers.SortedKeyList(key=lambda e: e.key)

    @property
    def flags(self):
        # Guaranteed by the insertion logic in add_row
        return ValidFlags.EDGES_COMBO_STANDALONE

    def copy(self):
        """
        Returns an unfrozen copy of this table
        """
        copy = self.__class__()
        copy._data.update(self._data)
        return copy

    def add_row(self, left, right, *, parent, child) -> int:
        """
        Add an edge to the table, keeping the table sorted.

        :return: The row ID of the newly added row. Note that row IDs of
            existing edges that sort after the new edge are shifted up by one.

        Example:
            new_id = edges.add_row(0, 10, parent=4, child=0)
        """
        if self._frozen:
            raise AttributeError("Trying to add a row to a frozen table")
        row = self.RowClass(
            check_int(left, "left"),
            check_int(right, "right"),
            parent=check_int(parent, "parent"),
            child=check_int(child, "child"),
        )
        if row.left >= row.right:
            raise ValueError(f"Edge left ({row.left}) must be less than right ({row.right})")
        pos = self._data.bisect_key_left(row.key)
        if pos < len(self._data) and self._data[pos].key == row.key:
            raise DuplicateEdgeError(f"Cannot have duplicate edges: {row} clashes with {self._data[pos]}")
        self._data.add(row)
        return pos

    def append(self, obj) -> int:
        """
        Add a row by picking the required fields from a passed-in object, which can be
        a dict, a dataclass (e.g. a :class:`tskit.EdgeTableRow`), or an object with an
        ``.asdict()`` method.
        """
        try:
            kwargs = obj.asdict()
        except AttributeError:
            try:
                kwargs = dataclasses.asdict(obj)
            except TypeError:
                kwargs = obj
        return self.add_row(
            kwargs["left"],
            kwargs["right"],
            parent=kwargs["parent"],
            child=kwargs["child"],
        )

    def max_node_id(self):
        """
        Return the largest node ID used by any edge, or ``-1`` if there are no edges
        """
        if len(self) == 0:
            return -1
        return int(max(self.parent.max(), self.child.max()))

    def max_right(self):
        if len(self) == 0:
            return 0
        return int(self.right.max())

    def ids_for_child(self, u):
        """
        Return the row IDs of all edges with child ``u``, in left-to-right order
        """
        return np.where(self.child == u)[0]

    @property
    def left(self) -> npt.NDArray[np.int64]:
        return self.__getattr__("left")

    @property
    def right(self) -> npt.NDArray[np.int64]:
        return self.__getattr__("right")

    @property
    def parent(self) -> npt.NDArray[np.int64]:
        return self.__getattr__("parent")

    @property
    def child(self) -> npt.NDArray[np.int64]:
        return self.__getattr__("child")
