import tskit

import treeseqlib as tsl
from treeseqlib.constants import ValidFlags


class TestConst:
    def test_tskit_aliases(self):
        assert tsl.NULL == tskit.NULL
        assert tsl.NODE_IS_SAMPLE == tskit.NODE_IS_SAMPLE


class TestValidFlags:
    def test_valid_flags(self):
        for flag in ValidFlags:
            if flag.name is not None and flag.name.startswith("EDGES_"):
                assert flag in ValidFlags.EDGES_ALL

    def test_edges_standalone(self):
        i = 0
        for flag in ValidFlags.edges_combo_standalone_iter():
            i += 1
            assert flag in ValidFlags.EDGES_COMBO_STANDALONE
        assert i == bin(ValidFlags.EDGES_COMBO_STANDALONE).count("1")
        assert ValidFlags.EDGES_FOR_CHILD_NONOVERLAPPING not in ValidFlags.EDGES_COMBO_STANDALONE
