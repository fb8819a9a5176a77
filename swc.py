#  Copyright (c) 2019. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE


"""
Module with simple matrix representation of swc tracing files
"""

import warnings

import numpy as np
import matplotlib.pyplot as pl
import seaborn as sns

from swc_graph import Graph, VertexType
from swc_parser import Parser
from swc_generator import reconcile_edges
from utilities import SWCException


# column layout of SWC.matrix
ID, TYPE, X, Y, Z, RADIUS, PARENT = range(7)


class SWC:
    """
    Stores an swc tracing as n_vertices x 7 matrix <id, type, x, y, z, radius, parent> for simple
    "find parent" (row where val[0]==parent_id) and "find all children" (rows where val[-1]==id) operations.
    Parents are resolved the same way they are written out, i.e. conflicting edges are reconciled.
    Note: Ids are stored as float64 and are therefore only exact up to 2**53
    """
    def __init__(self, graph: Graph):
        """
        Creates a new SWC object
        :param graph: The parsed tracing
        """
        if graph.n_vertices == 0:
            raise SWCException("Graph does not contain any vertices")
        child_to_parent, loops = reconcile_edges(graph.edges)
        if len(loops) > 0:
            warnings.warn(f"{len(loops)} conflicting edges could not be reconciled due to loops")
        self.meta = list(graph.meta)
        self.matrix = np.array([[v.id, int(v.type), v.x, v.y, v.z, v.radius, child_to_parent.get(v.id, -1)]
                                for v in graph.vertices], dtype=np.float64)
        # quick check for unique ids
        if np.unique(self.matrix[:, ID]).size != self.matrix.shape[0]:
            warnings.warn("Vertex ids are not unique. Lookups will return the first matching row")

    @staticmethod
    def load_swc(file_name: str):
        """
        Loads an swc file into matrix storage
        :param file_name: The file path and name of the swc file
        :return: SWC object
        """
        parser = Parser()
        result, graph = parser.read_swc_from_file(file_name)
        if not result:
            raise IOError(parser.error_message)
        return SWC(graph)

    @property
    def n_vertices(self):
        return self.matrix.shape[0]

    def _row_of(self, vertex_id):
        rows = np.nonzero(self.matrix[:, ID] == vertex_id)[0]
        if rows.size == 0:
            return None
        return rows[0]

    def find_parent(self, vertex_id):
        """
        Finds the parent of a vertex
        :param vertex_id: The id of the child vertex
        :return: The 7 element row of the parent or None if the vertex is a root, unknown, or its parent is unknown
        """
        row = self._row_of(vertex_id)
        if row is None:
            return None
        parent_id = self.matrix[row, PARENT]
        if parent_id == -1:
            return None
        parent_row = self._row_of(parent_id)
        if parent_row is None:
            return None
        return self.matrix[parent_row, :]

    def find_children(self, vertex_id):
        """
        Finds all direct children of a vertex
        :param vertex_id: The id of the parent vertex
        :return: n_children x 7 matrix of child rows
        """
        return self.matrix[self.matrix[:, PARENT] == vertex_id, :]

    @property
    def soma_coordinates(self):
        """
        n_soma x 3 [x,y,z] coordinates of all cell body points
        """
        is_soma = self.matrix[:, TYPE] == VertexType.Soma
        return self.matrix[is_soma, X:Z+1]

    @property
    def segment_lines(self):
        """
        For every vertex with a known parent a 2 x 3 array of [parent, child] x [x,y,z] coordinates
        """
        row_of_id = {}
        for i, vid in enumerate(self.matrix[:, ID]):
            if vid not in row_of_id:
                row_of_id[vid] = i
        lines = []
        for row in self.matrix:
            parent_row = row_of_id.get(row[PARENT])
            if row[PARENT] == -1 or parent_row is None:
                continue
            lines.append(np.vstack((self.matrix[parent_row, X:Z+1], row[X:Z+1])))
        return lines

    def plot(self, ax=None):
        """
        Plots the x-y projection of the tracing with cell bodies marked
        :param ax: Axis to plot on. If None a new figure will be created
        :return: The axis
        """
        if ax is None:
            fig, ax = pl.subplots()
        for seg in self.segment_lines:
            ax.plot(seg[:, 0], seg[:, 1], color='k', lw=0.5)
        soma = self.soma_coordinates
        if soma.shape[0] > 0:
            ax.scatter(soma[:, 0], soma[:, 1], s=10, color='C3', label='Soma')
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_aspect('equal')
        sns.despine(ax=ax)
        return ax
