#  Copyright (c) 2019. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE

"""
Serialization of Graph objects to/from HDF5 files
"""
import warnings
import json

import h5py
import numpy as np

from swc_graph import Graph, Vertex, Edge, vertex_type


VERSION = "1"


def _check_version(version):
    """
    Raises IOError if the file version can't be loaded
    """
    try:
        if version == b"unstable" or version == "unstable":
            warnings.warn("Graph file was created with development version of storage code. Trying to "
                          "load as version 1")
        elif int(version) > 1:
            raise IOError(f"File version {version} is larger than highest recognized version '1'")
    except ValueError:
        raise IOError(f"File version {version} not recognized")


def _create_array(file: h5py.File, name: str, data: np.ndarray):
    if data.size > 0:
        file.create_dataset(name, data=data, compression="gzip", compression_opts=5)
    else:
        file.create_dataset(name, data=data)


def save_graph(graph: Graph, file_name: str, ovr_if_exists=False):
    """
    Saves the graph to the indicated file in hdf5 format
    :param graph: The graph to save
    :param file_name: The name of the file to save to
    :param ovr_if_exists: If set to true and file exists it will be overwritten otherwise exception will be raised
    """
    if ovr_if_exists:
        dfile = h5py.File(file_name, "w")
    else:
        dfile = h5py.File(file_name, "x")
    try:
        dfile.create_dataset("version", data=VERSION)  # for later backwards compatibility
        dfile.create_dataset("n_vertices", data=graph.n_vertices)
        ids = np.array([v.id for v in graph.vertices], dtype=np.int64)
        types = np.array([int(v.type) for v in graph.vertices], dtype=np.int64)
        positions = np.array([[v.x, v.y, v.z] for v in graph.vertices], dtype=np.float64).reshape(-1, 3)
        radii = np.array([v.radius for v in graph.vertices], dtype=np.float32)
        edges = np.array([[e.parent_id, e.child_id] for e in graph.edges], dtype=np.int64).reshape(-1, 2)
        roots = np.array(sorted(graph.root_ids), dtype=np.int64)
        _create_array(dfile, "ids", ids)
        _create_array(dfile, "types", types)
        _create_array(dfile, "positions", positions)
        _create_array(dfile, "radii", radii)
        _create_array(dfile, "edges", edges)
        _create_array(dfile, "root_ids", roots)
        # comment lines can hold arbitrary text, so they are stored as one json string
        dfile.create_dataset("meta", data=json.dumps(graph.meta))
    finally:
        dfile.close()


def load_graph(file_name: str) -> Graph:
    """
    Loads a graph from a serialization in an hdf5 file
    :param file_name: The name of the hdf5 file storing the graph
    :return: Graph object with all vertices, edges, roots and comments
    """
    graph = Graph()
    with h5py.File(file_name, 'r') as dfile:
        _check_version(dfile["version"][()])
        n_vertices = int(dfile["n_vertices"][()])
        ids = dfile["ids"][()]
        types = dfile["types"][()]
        positions = dfile["positions"][()]
        radii = dfile["radii"][()]
        for i in range(n_vertices):
            graph.vertices.append(Vertex(int(ids[i]), vertex_type(int(types[i])), float(positions[i, 0]),
                                         float(positions[i, 1]), float(positions[i, 2]), float(radii[i])))
        for parent_id, child_id in dfile["edges"][()]:
            graph.edges.append(Edge(int(parent_id), int(child_id)))
        graph.root_ids.update(int(r) for r in dfile["root_ids"][()])
        meta = dfile["meta"][()]
        if isinstance(meta, bytes):
            meta = meta.decode('UTF-8')
        graph.meta.extend(json.loads(meta))
    return graph
