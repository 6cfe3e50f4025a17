import numpy as np

import treeseqlib as tsl

# Utilities for creating and inspecting tree sequences


def make_edges(arr, ts=None):
    """
    Make a tree sequence from a list of (left, right, parent, child) tuples.
    """
    if ts is None:
        ts = tsl.TreeSequence()
    for row in arr:
        ts.add_edge(row[0], row[1], parent=row[2], child=row[3])
    return ts


def example_builder():
    """
    The canonical example: three trees over a sequence of length 3.
    """
    return (
        tsl.TreeSequenceBuilder()
        .insert([0, 1], 4)
        .insert([2, 3], 5)
        .insert([4, 5], 6)
        .breakpoint(1)
        .transplant([0], 6)
        .transplant([1], 5)
        .breakpoint(2)
        .transplant([0, 5], None)
    )


def parents(tree):
    """
    Return the parent array of a tree as a list, with roots as None
    """
    return [None if p == tsl.NULL else p for p in tree.parent_array.tolist()]


def random_builder_ts(seed, num_samples=6, num_ancestors=6, num_breakpoints=10, sequence_length=100):
    """
    Build a tree sequence by a random series of transplants. Parents always have
    larger IDs than their children so that the result is acyclic.
    """
    rng = np.random.default_rng(seed)
    num_nodes = num_samples + num_ancestors
    builder = tsl.TreeSequenceBuilder().samples(range(num_samples))
    for child in range(num_nodes - 1):
        builder.insert([child], rng.integers(child + 1, num_nodes))
    positions = np.unique(rng.integers(1, sequence_length, size=num_breakpoints))
    for pos in positions:
        builder.breakpoint(pos)
        for child in rng.choice(num_nodes - 1, size=rng.integers(1, 4), replace=False):
            if rng.random() < 0.2:
                builder.transplant([child], None)
            else:
                builder.transplant([child], rng.integers(child + 1, num_nodes))
    return builder.end(sequence_length)
