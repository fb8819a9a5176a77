#  Copyright (c) 2019. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE

"""
Module to serialize Graph objects into canonical swc text
"""

import io
import warnings

import numpy as np

from swc_graph import Graph
from utilities import encode_text


def reconcile_edges(edges) -> (dict, list):
    """
    Builds the child to parent mapping used for writing. The first edge naming a child wins. Every later edge
    naming an already mapped child is a conflict which is absorbed by handing the conflicting parent's own
    parent slot to that child and pushing the displaced parent further up the chain until a free slot is found
    :param edges: Iterable of Edge objects, left untouched
    :return:
        [0]: Dictionary mapping child ids to parent ids
        [1]: List of (parent, child) conflicts whose chain closed into a loop. These are only partially applied
    """
    child_to_parent = {}
    conflicts = {}  # conflicting parent -> child, a later conflict of the same parent replaces the earlier one
    for e in edges:
        if e.child_id not in child_to_parent:
            child_to_parent[e.child_id] = e.parent_id
        else:
            conflicts[e.parent_id] = e.child_id
    loops = []
    for parent, child in sorted(conflicts.items()):
        start = child
        conflict = (parent, child)
        # each step takes over an occupied slot so a walk longer than this has to be circling
        max_steps = 2 * len(child_to_parent) + 2
        for _ in range(max_steps):
            if parent not in child_to_parent:
                child_to_parent[parent] = child
                break
            if parent == start:
                loops.append(conflict)
                break
            displaced = child_to_parent[parent]
            child_to_parent[parent] = child
            child = parent
            parent = displaced
        else:
            loops.append(conflict)
    return child_to_parent, loops


def format_coordinate(value: float, precision=15) -> str:
    """
    Formats a double with the given number of significant digits, using 17 digits if the short form
    would not parse back to the same value
    """
    s = "%.*g" % (precision, value)
    if value == value and float(s) != value:
        s = "%.17g" % value
    return s


def format_radius(value: float, precision=7) -> str:
    """
    Formats a single precision value, using 9 digits if the short form would not parse back to the same float32
    """
    s = "%.*g" % (precision, value)
    with np.errstate(over="ignore"):
        if value == value and np.float32(float(s)) != np.float32(value):
            s = "%.9g" % float(np.float32(value))
    return s


class Generator:
    """
    Writes Graph objects as swc. Keeps the diagnostics of the last call
    """
    def __init__(self, **kwargs):
        """
        Creates a new Generator
        :param coordinate_precision: Significant digits tried first for x, y and z. Values that would not round-trip
            are written with 17 digits
        :param radius_precision: Significant digits tried first for the single precision radius. Values that would
            not round-trip are written with 9 digits
        """
        if "coordinate_precision" in kwargs:
            self.coordinate_precision = kwargs["coordinate_precision"]
        else:
            self.coordinate_precision = 15
        if "radius_precision" in kwargs:
            self.radius_precision = kwargs["radius_precision"]
        else:
            self.radius_precision = 7
        self._errors = []

    @property
    def error_message(self) -> str:
        return "".join(self._errors)

    def get_error_message(self) -> str:
        return self.error_message

    def format_vertex(self, v, parent: int) -> str:
        c = self.coordinate_precision
        return (f" {v.id} {int(v.type)} {format_coordinate(v.x, c)} {format_coordinate(v.y, c)} "
                f"{format_coordinate(v.z, c)} {format_radius(v.radius, self.radius_precision)} {parent}\n")

    def write(self, graph: Graph) -> (bool, str):
        """
        Serializes a graph. Conflicting edges are reconciled on the fly, the graph itself is not modified
        :param graph: The graph to write
        :return:
            [0]: True - reconciliation loops are reported in error_message but do not fail the write
            [1]: The swc text
        """
        self._errors = []
        lines = [f"#{m}\n" for m in graph.meta]
        child_to_parent, loops = reconcile_edges(graph.edges)
        for parent, child in loops:
            self._errors.append("Loop detected!\n")
            warnings.warn(f"Loop detected while reconciling edge {parent} -> {child}. Edge was only partially "
                          f"reconciled.")
        for v in graph.vertices:
            lines.append(self.format_vertex(v, child_to_parent.get(v.id, -1)))
        return True, "".join(lines)

    def write_stream(self, stream, graph: Graph) -> bool:
        """
        Writes the serialized graph to a text or binary file-like object
        :return: False if the stream could not be written
        """
        result, text = self.write(graph)
        try:
            if isinstance(stream, io.TextIOBase):
                stream.write(text)
            else:
                try:
                    stream.write(encode_text(text))
                except TypeError:
                    # file-like object that only takes text
                    stream.write(text)
        except (IOError, OSError, TypeError) as e:
            self._errors.append(f"Error: Can not write to stream: {e}\n")
            return False
        return result

    def write_to_file(self, file_name: str, graph: Graph) -> bool:
        """
        Writes the serialized graph to file, replacing existing content
        :param file_name: The file path and name
        :param graph: The graph to write
        :return: False if the file could not be opened or written
        """
        result, text = self.write(graph)
        try:
            out_file = open(file_name, 'wb')
        except (IOError, OSError):
            self._errors.append(f"Error: Can not open file: {file_name}\n")
            return False
        try:
            with out_file:
                out_file.write(encode_text(text))
        except (IOError, OSError) as e:
            self._errors.append(f"Error: Can not write to file: {file_name}: {e}\n")
            return False
        return result
