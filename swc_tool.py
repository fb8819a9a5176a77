#  Copyright (c) 2021. Martin Haesemeyer. All rights reserved.
#
#  Licensced under the MIT license. See LICENSE

"""
Command line tool to check swc tracings, write them in canonical form and convert them to hdf5
"""

import os
import sys
import logging
import warnings
import argparse
from typing import Any

import matplotlib.pyplot as pl

from swc_parser import Parser
from swc_generator import Generator
from swc_store import save_graph
from swc import SWC
from utilities import ui_get_file


class CheckArgs(argparse.Action):
    """
    Check our command line arguments for validity
    """
    def __init__(self, option_strings, dest, nargs=None, **kwargs):
        if nargs is not None:
            raise ValueError("nargs not allowed")
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values: Any, option_string=None):
        if self.dest == 'file':
            if not os.path.exists(values):
                raise argparse.ArgumentError(self, "Tracing file does not exist")
            setattr(namespace, self.dest, values)
        elif self.dest == 'output' or self.dest == 'hdf5':
            if os.path.abspath(values) == os.path.abspath(getattr(namespace, 'file', "") or ""):
                raise argparse.ArgumentError(self, "Output would overwrite the input file")
            setattr(namespace, self.dest, values)
        else:
            raise Exception("Parser was asked to check unknown argument")


def main(swc_file: str, output_file: str, hdf5_file: str, plot: bool) -> int:
    """
    Parses a tracing, reports its content and writes requested outputs
    :param swc_file: The swc file to check. If empty a file dialog is shown
    :param output_file: If not empty, canonical swc is written to this file
    :param hdf5_file: If not empty, the graph is saved to this hdf5 file
    :param plot: If True, the x-y projection of the tracing is plotted
    :return: Exit status, 0 on success
    """
    if swc_file == "":
        swc_file = ui_get_file(filetypes=[('SWC tracing', '*.swc')], multiple=False)
        if type(swc_file) == list:
            swc_file = swc_file[0]
    parser = Parser()
    result, graph = parser.read_swc_from_file(swc_file)
    if not result:
        print(f"Failed to parse {swc_file}")
        print(parser.error_message, end="")
        return 1
    print(f"{swc_file}: {graph.n_vertices} vertices, {len(graph.edges)} edges, {len(graph.root_ids)} roots, "
          f"{len(graph.meta)} comment lines")
    if output_file != "":
        generator = Generator()
        result = generator.write_to_file(output_file, graph)
        if generator.error_message != "":
            print(generator.error_message, end="")
        if not result:
            return 1
        print(f"Canonical swc saved to: {output_file}")
    if hdf5_file != "":
        save_graph(graph, hdf5_file, ovr_if_exists=True)
        print(f"Graph saved to: {hdf5_file}")
    if plot and graph.n_vertices > 0:
        SWC(graph).plot()
        pl.show()
    return 0


if __name__ == "__main__":

    a_parser = argparse.ArgumentParser(prog="swc_tool",
                                       description="Parses an swc tracing, reports its content and optionally writes"
                                                   " it back in canonical form or as hdf5 file.")
    a_parser.add_argument("-f", "--file", help="File name and path of the swc tracing", type=str, default="",
                          action=CheckArgs)
    a_parser.add_argument("-o", "--output", help="File name and path of canonical swc output", type=str, default="",
                          action=CheckArgs)
    a_parser.add_argument("--hdf5", help="File name and path of hdf5 output", type=str, default="", action=CheckArgs)
    a_parser.add_argument("--plot", help="Plot x-y projection of the tracing", action="store_true")

    args = a_parser.parse_args()

    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter(action='ignore', category=FutureWarning)
    warnings.simplefilter(action='ignore', category=DeprecationWarning)

    sys.exit(main(args.file, args.output, args.hdf5, args.plot))
