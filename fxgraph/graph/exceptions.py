"""
Graph Exceptions
"""


class GraphContractError(Exception):
    """
    The graph API was misused.

    Raised for ids the graph never issued and for links whose ends have the
    wrong direction. These are bugs in the caller building the graph, not
    data errors, and are never caught by the library.
    """
