import sys
from importlib.metadata import PackageNotFoundError, version

if sys.version_info[0] < 3:  # pragma: no cover
    raise Exception("Python 3 only")

try:
    __version__ = version("treeseqlib")
except PackageNotFoundError:
    __version__ = "unknown version"

from .builder import TreeSequenceBuilder  # noqa: F401
from .constants import (
    Const,
    ValidFlags,  # noqa: F401
)
from .exceptions import (  # noqa: F401
    BuilderFinalizedError,
    DanglingTransplantError,
    DuplicateEdgeError,
    OpenEdgeError,
    TreeSequenceError,
)
from .tables import Edge, EdgeTable  # noqa: F401
from .trees import StreamingTreeIterator, Tree, TreeSequenceIterator  # noqa: F401
from .treesequence import Node, TreeSequence  # noqa: F401
from .util import set_print_options  # noqa: F401

NULL = Const.NULL
NODE_IS_SAMPLE = Const.NODE_IS_SAMPLE

_print_options = {"max_lines": 40}
