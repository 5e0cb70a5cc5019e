import argparse
import logging
import sys

import numpy as np

from flow_analysis import (ConsoleObserver, build_flow_digraph, networkx_max_flow,
                           visualize_flow)
from flow_network import FlowNetwork

logger = logging.getLogger(__name__)

SUPER_SOURCE_LABEL = 'Super_S'
SUPER_SINK_LABEL = 'Super_T'


class AdjacencyListError(ValueError):
    """Raised when adjacency-list text cannot be parsed"""


class BipartiteGraph:
    """
    Left and right node names in first-seen order plus the edges of each
    left node.
    """
    def __init__(self):
        self.left = []
        self.right = []
        self.edges = {}
        self._left_indices = {}
        self._right_indices = {}

    def add_left(self, name, neighbors):
        """
        Register a left node with its right-side neighbors.

        Right names are always registered. Only the first entry for a left
        node keeps its edges; later entries for the same name are ignored.

        Returns:
            True if the entry was kept, False if it was a duplicate
        """
        for neighbor in neighbors:
            if neighbor not in self._right_indices:
                self._right_indices[neighbor] = len(self.right)
                self.right.append(neighbor)

        if name in self.edges:
            return False

        self._left_indices[name] = len(self.left)
        self.left.append(name)
        self.edges[name] = list(neighbors)
        return True

    @property
    def size(self):
        """Node count of the flow network, super source and sink included"""
        return len(self.left) + len(self.right) + 2

    @property
    def super_source(self):
        return 0

    @property
    def super_sink(self):
        return self.size - 1

    def left_index(self, name):
        return self._left_indices[name] + 1

    def right_index(self, name):
        return self._right_indices[name] + len(self.left) + 1

    def labels(self):
        """Node label for every flow network index"""
        return [SUPER_SOURCE_LABEL] + self.left + self.right + [SUPER_SINK_LABEL]


class MatchingResult:
    def __init__(self, max_flow, matches, flow_graph, network):
        self.max_flow = max_flow
        self.matches = matches
        self.flow_graph = flow_graph
        self.network = network

    def __repr__(self):
        return f"MatchingResult(max_flow={self.max_flow}, matches={self.matches})"


def parse_adjacency_list(lines):
    """
    Parse adjacency-list lines of the form ``left>right1,right2``, one
    left-side node per line followed by the right-side nodes it may be
    matched with:

        A>x,y
        B>y

    Args:
        lines: Iterable of text lines

    Returns:
        BipartiteGraph

    Raises:
        AdjacencyListError: If a line has no '>' or no left node name
    """
    graph = BipartiteGraph()

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        if '>' not in line:
            raise AdjacencyListError(f"Line {line_number}: expected 'left>right,...', got {line!r}")

        left, right_part = line.split('>', 1)
        left = left.strip()
        if not left:
            raise AdjacencyListError(f"Line {line_number}: missing left node name")

        neighbors = [name.strip() for name in right_part.split(',')]
        neighbors = [name for name in neighbors if name]

        if not graph.add_left(left, neighbors):
            logger.debug("Line %d: ignoring duplicate entry for %s", line_number, left)

    return graph


def read_adjacency_list(path):
    """
    Read and parse a UTF-8 adjacency-list file.

    Raises:
        OSError: If the file cannot be opened
        AdjacencyListError: If the file is not valid UTF-8 or a line is malformed
    """
    try:
        with open(path, encoding='utf-8') as f:
            return parse_adjacency_list(f)
    except UnicodeDecodeError as e:
        raise AdjacencyListError(f"Not valid UTF-8 text: {e}") from e


def build_capacity_matrix(graph):
    """
    Build the unit-capacity flow network of a bipartite graph.

    Index 0 is the super source, then the left nodes, then the right nodes,
    and the last index is the super sink.

    Returns:
        Square int64 numpy array
    """
    size = graph.size
    capacity = np.zeros((size, size), dtype=np.int64)

    for name in graph.left:
        capacity[graph.super_source, graph.left_index(name)] = 1

    for name in graph.right:
        capacity[graph.right_index(name), graph.super_sink] = 1

    for name, neighbors in graph.edges.items():
        i = graph.left_index(name)
        for neighbor in neighbors:
            capacity[i, graph.right_index(neighbor)] = 1

    return capacity


def decode_matches(flow_graph, graph):
    """
    Read the matching off a flow matrix.

    Args:
        flow_graph: Flow matrix computed on build_capacity_matrix(graph)
        graph: The BipartiteGraph the matrix was built from

    Returns:
        Dict of left name -> right name, ordered by left name
    """
    flow_graph = np.asarray(flow_graph)
    offset = len(graph.left) + 1
    matches = {}

    for i, left in enumerate(graph.left, start=1):
        for j in np.flatnonzero(flow_graph[i, offset:offset + len(graph.right)] > 0):
            matches[left] = graph.right[j]

    return {left: matches[left] for left in sorted(matches)}


def solve_matching(graph, observer=None):
    """
    Compute a maximum matching of a bipartite graph.

    Args:
        graph: BipartiteGraph
        observer: Optional FlowObserver passed to the flow computation

    Returns:
        MatchingResult
    """
    capacity = build_capacity_matrix(graph)
    network = FlowNetwork(capacity, graph.super_source, graph.super_sink, observer=observer)
    max_flow = network.compute_max_flow()
    flow_graph = network.get_flow_graph()

    return MatchingResult(max_flow, decode_matches(flow_graph, graph), flow_graph, network)


def bipartite_layout(graph):
    """Column positions: super source, left nodes, right nodes, super sink"""
    pos = {graph.super_source: (0, (len(graph.left) - 1) / 2),
           graph.super_sink: (3, (len(graph.right) - 1) / 2)}

    # First node on top
    for row, name in enumerate(graph.left):
        pos[graph.left_index(name)] = (1, len(graph.left) - 1 - row)
    for row, name in enumerate(graph.right):
        pos[graph.right_index(name)] = (2, len(graph.right) - 1 - row)

    return pos


def bipartite_node_groups(graph):
    return {
        'Super Nodes': ([graph.super_source, graph.super_sink], 'gold'),
        'Left Nodes': ([graph.left_index(name) for name in graph.left], 'lightgreen'),
        'Right Nodes': ([graph.right_index(name) for name in graph.right], 'skyblue'),
    }


def print_answer(result):
    print("***************************************************")
    print(f"Max Flow: {result.max_flow}")
    print("Matches:")
    for left, right in result.matches.items():
        print(f"\t{left}-->{right}")
    print("***************************************************")


def main(argv=None):
    """
    Entry point: read an adjacency-list file and print its maximum matching.

    Returns:
        Process exit status
    """
    parser = argparse.ArgumentParser(description='Maximum bipartite matching via Edmonds-Karp max flow')
    parser.add_argument('filename', help='Adjacency list file, one "left>right1,right2" entry per line')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print every search, augmentation and intermediate matrix')
    parser.add_argument('--check', action='store_true',
                        help='Verify the max flow value against networkx')
    parser.add_argument('--plot', metavar='PATH',
                        help='Save a drawing of the matching network to PATH')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        graph = read_adjacency_list(args.filename)
    except OSError as e:
        print(f"Cannot read {args.filename}: {e}", file=sys.stderr)
        return 1
    except AdjacencyListError as e:
        print(f"Malformed input in {args.filename}: {e}", file=sys.stderr)
        return 1

    observer = ConsoleObserver(graph.labels()) if args.verbose else None
    result = solve_matching(graph, observer=observer)
    print_answer(result)

    if args.check:
        expected = networkx_max_flow(result.network)
        if expected != result.max_flow:
            print(f"Max flow mismatch: networkx reports {expected}", file=sys.stderr)
            return 1
        print(f"networkx agrees: {expected}")

    if args.plot:
        G = build_flow_digraph(result.network, labels=graph.labels())
        visualize_flow(G, pos=bipartite_layout(graph),
                       title=f"Bipartite Matching - Max Flow: {result.max_flow}",
                       node_groups=bipartite_node_groups(graph),
                       save_path=args.plot, show=False)
        print(f"Saved matching visualization to: {args.plot}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
