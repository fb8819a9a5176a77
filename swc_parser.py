#  Copyright (c) 2019. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE

"""
Module with a line based parser of swc tracing files

Every line is either empty, a comment starting with '#' or a data line with exactly seven fields:
    id type x y z radius parent
where a parent of -1 marks a root of the traced forest
"""

import re

import numpy as np

from swc_graph import Graph, Vertex, Edge, vertex_type
from utilities import decode_buffer, read_file_buffer


# integer literals as accepted by C strtoll with automatic radix detection
_INTEGER = re.compile(r"(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))")
_REAL = re.compile(r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)
_INT64 = np.iinfo(np.int64)
_WHITE_SPACE = " \t"
_END_OF_LINE = "\r\n"


class Parser:
    """
    Converts swc text into a Graph. Holds the scan position and the diagnostics of the last call,
    so one instance must not be shared between threads
    """
    def __init__(self):
        self._text = ""
        self._pos = 0
        self._line = 1
        self._errors = []

    @property
    def error_message(self) -> str:
        """
        The diagnostics of the most recent parse. Empty if it succeeded
        """
        return "".join(self._errors)

    def get_error_message(self) -> str:
        return self.error_message

    def read_swc(self, text, graph=None) -> (bool, Graph):
        """
        Parses a complete swc buffer
        :param text: The swc content as str or bytes
        :param graph: Graph to populate. Its previous content is erased. If None a new graph is created
        :return:
            [0]: True if the whole buffer was parsed
            [1]: The graph. On failure it still holds everything parsed before the offending line
        """
        if graph is None:
            graph = Graph()
        graph.clear()
        self._errors = []
        self._text = decode_buffer(text)
        self._pos = 0
        self._line = 1
        while not self._at_end():
            if not self._accept_line(graph):
                self._error(f"unexpected symbol: {self._describe_symbol()}")
                return False, graph
        return True, graph

    def read_swc_stream(self, stream, graph=None) -> (bool, Graph):
        """
        Reads a text or binary file-like object to its end and parses the content
        """
        return self.read_swc(stream.read(), graph)

    def read_swc_from_file(self, file_name: str, graph=None) -> (bool, Graph):
        """
        Parses the swc file at the given path
        :param file_name: The file path and name
        :param graph: Graph to populate, see read_swc
        :return: See read_swc
        """
        try:
            content = read_file_buffer(file_name)
        except (IOError, OSError):
            if graph is None:
                graph = Graph()
            self._errors = [f"Error: Can not open file: {file_name}\n"]
            return False, graph
        return self.read_swc(content, graph)

    def _error(self, message: str):
        self._errors.append(f"Error at line: {self._line}, {message}\n")

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _current(self) -> str:
        return "" if self._at_end() else self._text[self._pos]

    def _describe_symbol(self) -> str:
        if self._at_end():
            return "end of input"
        return repr(self._current())

    def _accept(self, symbol: str) -> bool:
        if not self._at_end() and self._text[self._pos] == symbol:
            self._pos += 1
            return True
        return False

    def _skip_white_space(self):
        while not self._at_end() and self._text[self._pos] in _WHITE_SPACE:
            self._pos += 1

    def _accept_end_of_line(self) -> bool:
        if self._accept('\n'):
            self._line += 1
            return True
        if self._accept('\r'):
            self._accept('\n')
            self._line += 1
            return True
        return False

    def _accept_line(self, graph: Graph) -> bool:
        self._skip_white_space()
        if self._at_end() or self._accept_end_of_line():
            return True
        if self._accept('#'):
            comment_start = self._pos
            while not self._at_end() and self._text[self._pos] not in _END_OF_LINE:
                self._pos += 1
            graph.meta.append(self._text[comment_start:self._pos])
            self._accept_end_of_line()
            return True
        return self._accept_data_line(graph)

    def _accept_data_line(self, graph: Graph) -> bool:
        vertex_id = self._accept_integer()
        if vertex_id is None:
            return False
        type_code = self._accept_integer()
        if type_code is None:
            self._error("wrong coordinates. You need to specify type as an integer value.")
            return False
        coordinates = []
        for _ in range(3):
            c = self._accept_real()
            if c is None:
                self._error("wrong coordinates. You need to specify coordinates as three double values.")
                return False
            coordinates.append(c)
        radius = self._accept_real()
        if radius is None:
            self._error("wrong radius. You need to specify a radius as a float value.")
            return False
        parent = self._accept_integer()
        if parent is None:
            self._error("wrong parent. You need to specify an id of a parent, or -1 if there is no parent.")
            return False
        if not self._at_end() and self._current() not in _END_OF_LINE:
            self._error("too many fields. A data line holds exactly seven values.")
            return False
        x, y, z = coordinates
        with np.errstate(over="ignore"):
            radius = float(np.float32(radius))  # radii are single precision
        graph.vertices.append(Vertex(vertex_id, vertex_type(type_code), x, y, z, radius))
        if parent != -1:
            graph.edges.append(Edge(parent, vertex_id))
        else:
            graph.root_ids.add(vertex_id)
        self._accept_end_of_line()
        return True

    def _accept_integer(self):
        """
        Consumes an integer literal and any white space following it
        :return: The value clamped to the 64 bit range or None if no digit could be consumed
        """
        m = _INTEGER.match(self._text, self._pos)
        if m is None:
            return None
        if m.group("hex") is not None:
            value = int(m.group("hex"), 16)
        elif m.group("oct") is not None:
            value = int(m.group("oct"), 8)
        else:
            value = int(m.group("dec"))
        if m.group("sign") == "-":
            value = -value
        self._pos = m.end()
        self._skip_white_space()
        return min(max(value, int(_INT64.min)), int(_INT64.max))

    def _accept_real(self):
        """
        Consumes the longest floating point literal prefix and any white space following it
        :return: The value or None if no literal could be consumed
        """
        m = _REAL.match(self._text, self._pos)
        if m is None:
            return None
        self._pos = m.end()
        self._skip_white_space()
        return float(m.group(0))
