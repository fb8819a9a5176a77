#  Copyright 2019 Martin Haesemeyer. All rights reserved.
#
# Licensed under the MIT license

"""Tests for the SWC matrix view."""

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as pl
import pytest

from swc import SWC, ID, PARENT
from swc_graph import Graph, Edge
from swc_parser import Parser
from utilities import SWCException


TRACING = ("# test cell\n"
           "1 1 0 0 0 5 -1\n"
           "2 1 1 0 0 5 1\n"
           "3 3 2 1 0 1 2\n"
           "4 3 2 -1 0 1 2\n"
           "5 2 -1 0 3 0.5 1\n")


@pytest.fixture
def swc():
    result, graph = Parser().read_swc(TRACING)
    assert result
    return SWC(graph)


class TestSWC:

    def test_matrix_layout(self, swc):
        assert swc.matrix.shape == (5, 7)
        assert swc.n_vertices == 5
        assert np.array_equal(swc.matrix[:, ID], [1, 2, 3, 4, 5])
        assert np.array_equal(swc.matrix[:, PARENT], [-1, 1, 2, 2, 1])
        assert np.array_equal(swc.matrix[4], [5, 2, -1, 0, 3, 0.5, 1])
        assert swc.meta == [" test cell"]

    def test_find_parent(self, swc):
        assert np.array_equal(swc.find_parent(3)[:5], [2, 1, 1, 0, 0])
        assert swc.find_parent(1) is None
        assert swc.find_parent(42) is None

    def test_find_parent_outside_tracing(self):
        result, graph = Parser().read_swc("1 1 0 0 0 1 7\n")
        assert SWC(graph).find_parent(1) is None

    def test_find_children(self, swc):
        children = swc.find_children(2)
        assert np.array_equal(children[:, ID], [3, 4])
        assert swc.find_children(5).shape == (0, 7)

    def test_soma_coordinates(self, swc):
        assert np.array_equal(swc.soma_coordinates, [[0, 0, 0], [1, 0, 0]])

    def test_segment_lines(self, swc):
        lines = swc.segment_lines
        assert len(lines) == 4
        assert np.array_equal(lines[0], [[0, 0, 0], [1, 0, 0]])
        assert np.array_equal(lines[-1], [[0, 0, 0], [-1, 0, 3]])

    def test_conflicts_are_reconciled(self):
        result, graph = Parser().read_swc("1 1 0 0 0 1 -1\n2 1 0 0 0 1 -1\n3 3 0 0 0 1 1\n")
        graph.edges.append(Edge(2, 3))
        s = SWC(graph)
        assert np.array_equal(s.matrix[:, PARENT], [-1, 3, 1])

    def test_empty_graph(self):
        with pytest.raises(SWCException):
            SWC(Graph())

    def test_duplicate_ids_warn(self):
        result, graph = Parser().read_swc("1 1 0 0 0 1 -1\n1 3 0 0 0 1 -1\n")
        with pytest.warns(UserWarning, match="not unique"):
            SWC(graph)

    def test_load_swc(self, tmp_path):
        swc_file = tmp_path / "cell.swc"
        swc_file.write_text(TRACING)
        s = SWC.load_swc(str(swc_file))
        assert s.n_vertices == 5

    def test_load_swc_failure(self, tmp_path):
        swc_file = tmp_path / "bad.swc"
        swc_file.write_text("1 1 0 0 0\n")
        with pytest.raises(IOError, match="wrong radius"):
            SWC.load_swc(str(swc_file))

    def test_plot(self, swc):
        fig, ax = pl.subplots()
        assert swc.plot(ax) is ax
        assert len(ax.lines) == 4
        pl.close(fig)
