"""
Build the canonical example tree sequence and print its trees, once
using the eager iterator and once using the streaming iterator.
"""
import treeseqlib as tsl
from tests.tsutil import parents

EXPECTED_OUTPUT = """\
Tree 0: [4, 4, 5, 5, 6, 6, None]
Tree 1: [6, 5, 5, 5, 6, 6, None]
Tree 2: [None, 5, 5, 5, 6, None, None]
"""


def print_trees(ts):
    for tree_index, t in enumerate(ts.trees()):
        print(f"Tree {tree_index}: {parents(t)}")


def print_streaming_trees(ts):
    ts.for_each_tree(lambda tree_index, t: print(f"Tree {tree_index}: {parents(t)}"))


def build():
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
        .end(3)
    )


def test_print_eager(capsys):
    print_trees(build())
    assert capsys.readouterr().out == EXPECTED_OUTPUT


def test_print_streaming(capsys):
    print_streaming_trees(build())
    assert capsys.readouterr().out == EXPECTED_OUTPUT


def test_eager_matches_streaming():
    ts = build()
    eager = [parents(t) for t in ts.trees()]
    streaming = []
    iterator = ts.streaming_trees()
    while iterator.next():
        streaming.append(parents(iterator.tree))
    assert eager == streaming
