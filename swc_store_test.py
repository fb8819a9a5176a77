#  Copyright 2019 Martin Haesemeyer. All rights reserved.
#
# Licensed under the MIT license

"""Tests for hdf5 serialization of graphs."""

import h5py
import pytest

from swc_graph import Graph, Edge, VertexType
from swc_parser import Parser
from swc_store import save_graph, load_graph


TRACING = ("# stored cell\n"
           "# \xb5m\n"
           "1 1 0.125 2 3 4.5 -1\n"
           "2 3 1e-3 -2 3 0.1 1\n"
           "3 11 5 6 7 0.25 1\n"
           "4 3 1 1 1 1 99\n")


def _parsed():
    result, graph = Parser().read_swc(TRACING)
    assert result
    return graph


class TestStore:

    def test_round_trip(self, tmp_path):
        graph = _parsed()
        file_name = str(tmp_path / "cell.hdf5")
        save_graph(graph, file_name)
        loaded = load_graph(file_name)
        assert loaded.meta == graph.meta
        assert loaded.root_ids == {1}
        assert loaded.edges == [Edge(1, 2), Edge(1, 3), Edge(99, 4)]
        for a, b in zip(graph.vertices, loaded.vertices):
            assert (a.id, a.type, a.x, a.y, a.z, a.radius) == (b.id, b.type, b.x, b.y, b.z, b.radius)
        assert loaded.vertices[0].type is VertexType.Soma
        assert loaded.vertices[2].type == 11

    def test_empty_graph(self, tmp_path):
        file_name = str(tmp_path / "empty.hdf5")
        save_graph(Graph(), file_name)
        assert load_graph(file_name).is_empty

    def test_no_overwrite_by_default(self, tmp_path):
        file_name = str(tmp_path / "cell.hdf5")
        save_graph(_parsed(), file_name)
        with pytest.raises(OSError):
            save_graph(_parsed(), file_name)
        save_graph(Graph(), file_name, ovr_if_exists=True)
        assert load_graph(file_name).is_empty

    def test_newer_version_rejected(self, tmp_path):
        file_name = str(tmp_path / "cell.hdf5")
        save_graph(_parsed(), file_name)
        with h5py.File(file_name, 'r+') as dfile:
            del dfile["version"]
            dfile.create_dataset("version", data="2")
        with pytest.raises(IOError, match="larger than highest"):
            load_graph(file_name)

    def test_unstable_version_warns(self, tmp_path):
        file_name = str(tmp_path / "cell.hdf5")
        save_graph(_parsed(), file_name)
        with h5py.File(file_name, 'r+') as dfile:
            del dfile["version"]
            dfile.create_dataset("version", data="unstable")
        with pytest.warns(UserWarning, match="development version"):
            graph = load_graph(file_name)
        assert graph.n_vertices == 4
