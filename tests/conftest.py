import msprime
import pytest

import treeseqlib as tsl
from tests.tsutil import example_builder, make_edges


@pytest.fixture(scope="session")
def example_ts():
    return example_builder().end(3)


@pytest.fixture(scope="session")
def hand_rolled_ts():
    # left | right | parent | child
    edge_data = [
        (0, 1, 4, 0),
        (0, 1, 4, 1),
        (0, 3, 5, 2),
        (0, 3, 5, 3),
        (0, 3, 6, 4),
        (0, 2, 6, 5),
        (1, 2, 6, 0),
        (1, 3, 5, 1),
    ]
    return make_edges(edge_data)


@pytest.fixture(scope="session")
def gappy_ts():
    """
    Edges which leave the start, a middle region and the end of the genome
    without any ancestry
    """
    ts = make_edges(
        [
            (2, 5, 2, 0),
            (2, 4, 2, 1),
            (7, 9, 3, 0),
        ]
    )
    ts.set_sequence_length(10)
    ts.freeze()
    return ts


@pytest.fixture(scope="session")
def simple_msp_ts():
    return msprime.sim_ancestry(4, recombination_rate=0.05, sequence_length=100, random_seed=1)


@pytest.fixture(scope="session")
def simple_ts(simple_msp_ts):
    assert simple_msp_ts.num_trees > 1
    return tsl.TreeSequence.from_tree_sequence(simple_msp_ts)
