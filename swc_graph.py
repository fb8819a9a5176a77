#  Copyright (c) 2019. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE

"""
Plain value types describing an swc tracing: vertices, parent-child edges and the graph holding both
"""

from enum import IntEnum


class VertexType(IntEnum):
    """
    Known swc structure identifiers. The format tolerates custom codes, see vertex_type
    """
    Undefined = 0
    Soma = 1
    Axon = 2
    Dendrite = 3
    ApicalDendrite = 4
    ForkPoint = 5
    EndPoint = 6
    Custom = 7


def vertex_type(code: int):
    """
    Maps an integer structure code to its named VertexType
    :param code: The structure code as found in the type column
    :return: The matching VertexType member or the unchanged integer code if it is not a known type
    """
    try:
        return VertexType(code)
    except ValueError:
        return int(code)


class Vertex:
    def __init__(self, vertex_id: int, v_type, x: float, y: float, z: float, radius: float):
        self.id = vertex_id
        self.type = v_type  # VertexType or raw integer code for non-standard types
        self.x = x
        self.y = y
        self.z = z
        self.radius = radius  # single precision value stored as python float
        self.visited = False  # reserved for traversals by consumers

    def __repr__(self):
        return f"Vertex({self.id}, {int(self.type)}, {self.x}, {self.y}, {self.z}, {self.radius})"


class Edge:
    def __init__(self, parent_id: int, child_id: int):
        self.parent_id = parent_id
        self.child_id = child_id

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return self.parent_id == other.parent_id and self.child_id == other.child_id

    def __hash__(self):
        return hash((self.parent_id, self.child_id))

    def __repr__(self):
        return f"Edge({self.parent_id}, {self.child_id})"


class Graph:
    """
    Forest of traced points. Nothing in here is validated: ids need not be unique and
    several edges may name the same child
    """
    def __init__(self):
        self.vertices = []  # list of Vertex in source line order
        self.edges = []  # list of Edge, one per non-root vertex when parsed
        self.root_ids = set()  # ids of vertices whose parent was -1
        self.meta = []  # comment lines without the leading '#'

    def clear(self):
        self.vertices.clear()
        self.edges.clear()
        self.root_ids.clear()
        self.meta.clear()

    @property
    def n_vertices(self):
        return len(self.vertices)

    @property
    def is_empty(self):
        return len(self.vertices) == 0 and len(self.edges) == 0 and len(self.root_ids) == 0 and len(self.meta) == 0
