import itertools

import numpy as np


def truncate_rows(num_rows, limit=None):
    """
    Return a list of indexes into a set of rows, but if a ``limit`` is set, truncate the
    number of rows and place a single ``-1`` entry, instead of the intermediate indexes
    """
    if limit is None or num_rows <= limit:
        return range(num_rows)
    return itertools.chain(
        range(limit // 2),
        [-1],
        range(num_rows - (limit - (limit // 2)), num_rows),
    )


def set_print_options(*, max_lines=40):
    """
    Set the options for printing to strings and HTML

    :param integer max_lines: The maximum number of lines to print from a table, beyond
    this number the middle of the table will be skipped.
    """
    # avoid circular import complaints
    from . import _print_options  # pylint: disable=import-outside-toplevel

    _print_options["max_lines"] = max_lines


def check_int(i, name="value", convert=False):
    """
    Return ``i`` as a python integer, raising a ``TypeError`` if it is not an
    integer and a ``ValueError`` if it is negative. If ``convert`` is True,
    floats with an integer value are also accepted.
    """
    if isinstance(i, bool):
        raise TypeError(f"Expected {name} to be an integer, not {i!r}")
    if isinstance(i, (int, np.integer)):
        i = int(i)
    else:
        try:
            is_integer = i.is_integer()
        except AttributeError:
            raise TypeError(f"Could not convert {name}={i!r} to an integer")
        if not (convert and is_integer):
            raise ValueError(f"Expected {name} to be an integer not {i}")
        i = int(i)
    if i < 0:
        raise ValueError(f"{name} must be non-negative, got {i}")
    return i
