import logging
from collections import deque
from typing import NamedTuple

import numpy as np

logger = logging.getLogger(__name__)

# Largest value an int64 matrix cell can hold
MAX_CAPACITY = int(np.iinfo(np.int64).max)


class InvalidGraphError(ValueError):
    """Raised when a capacity matrix or its source/sink indices are malformed"""


class Edge(NamedTuple):
    """A directed edge between two node indices"""
    start: int
    end: int

    def __str__(self):
        return f"{self.start}-->{self.end}"


class Path:
    """
    An augmenting path: the ordered edges of a source-to-sink walk
    through the residual graph.
    """
    def __init__(self, edges=()):
        self.edges = list(edges)

    @classmethod
    def from_parents(cls, parents, source, sink):
        """
        Rebuild the path ending at sink by following parent pointers back
        to source.

        Args:
            parents: Parent index for each node (-1 if undiscovered)
            source: Source node
            sink: Sink node

        Returns:
            Path with edges in source-to-sink order
        """
        edges = []
        node = sink
        while node != source:
            parent = parents[node]
            edges.append(Edge(parent, node))
            node = parent
        edges.reverse()
        return cls(edges)

    def nodes(self):
        """Node indices visited by the path, source first"""
        if not self.edges:
            return []
        return [self.edges[0].start] + [edge.end for edge in self.edges]

    def __iter__(self):
        return iter(self.edges)

    def __len__(self):
        return len(self.edges)

    def __getitem__(self, index):
        return self.edges[index]

    def __eq__(self, other):
        if not isinstance(other, Path):
            return NotImplemented
        return self.edges == other.edges

    def __repr__(self):
        return f"Path({self.edges!r})"

    def __str__(self):
        return "->".join(str(node) for node in self.nodes())


class FlowObserver:
    """
    Receives progress callbacks from FlowNetwork.compute_max_flow.
    Subclasses override the phases they care about; observers must not
    modify the network.
    """
    def on_reset(self, network):
        pass

    def on_search(self, network, path, order, parents):
        """
        Called after every search. order lists nodes in discovery order and
        parents holds each node's parent (-1 if undiscovered); both stop at
        the sink, since the search ends once it is found.
        """
        pass

    def on_augment(self, network, path, bottleneck):
        pass

    def on_finish(self, network):
        pass


class FlowNetwork:
    """
    Maximum flow of a capacity matrix using the Ford-Fulkerson method with
    breadth-first augmenting paths (Edmonds-Karp).

    The flow and residual matrices hold no meaningful values until
    compute_max_flow() is called.
    """
    def __init__(self, capacity, source, sink, observer=None):
        """
        Initialize the network from an adjacency matrix of capacities.

        Args:
            capacity: Square matrix of non-negative integers, capacity[i][j] > 0
                meaning an edge i -> j. List of lists or 2-D numpy array.
            source: Index of the source node
            sink: Index of the sink node
            observer: Optional FlowObserver notified during computation

        Raises:
            InvalidGraphError: If the matrix or the indices are malformed
        """
        self._capacity = _validate_capacity(capacity)
        self._capacity.setflags(write=False)
        self._source = _validate_index(source, len(self._capacity), "source")
        self._sink = _validate_index(sink, len(self._capacity), "sink")
        if self._source == self._sink:
            raise InvalidGraphError(f"Source and sink must differ (both are {self._source})")

        self.observer = observer if observer is not None else FlowObserver()
        self._flow = np.zeros_like(self._capacity)
        self._residual = self._capacity.copy()
        self._max_flow = 0
        self._iterations = 0

    @property
    def size(self):
        return len(self._capacity)

    @property
    def source(self):
        return self._source

    @property
    def sink(self):
        return self._sink

    @property
    def capacity(self):
        return self._capacity.copy()

    @property
    def residual_graph(self):
        return self._residual.copy()

    @property
    def iterations(self):
        """Number of augmenting paths applied by the last computation"""
        return self._iterations

    def get_flow_graph(self):
        """Current flow matrix (all zeros before compute_max_flow)"""
        return self._flow.copy()

    def get_max_flow(self):
        """Current max flow value (0 before compute_max_flow)"""
        return self._max_flow

    def compute_max_flow(self):
        """
        Compute the maximum flow from source to sink.

        Resets the flow and residual matrices, then augments along shortest
        residual paths until none remains. Calling it again repeats the same
        deterministic computation.

        Returns:
            Maximum flow value
        """
        self._flow = np.zeros_like(self._capacity)
        self._residual = self._capacity.copy()
        self._max_flow = 0
        self._iterations = 0
        self.observer.on_reset(self)

        path = self._find_path()
        while path is not None:
            bottleneck = self._get_bottleneck(path)
            self._update_flow(path, bottleneck)
            self._update_residual(path, bottleneck)
            self._iterations += 1
            logger.debug("Augmented %s by %d", path, bottleneck)
            self.observer.on_augment(self, path, bottleneck)

            path = self._find_path()

        self._max_flow = self._total_flow()
        logger.debug("Max flow %d after %d augmentations", self._max_flow, self._iterations)
        self.observer.on_finish(self)
        return self._max_flow

    def _find_path(self):
        """
        Breadth-first search for a source-to-sink path in the residual graph.
        Neighbors are discovered in increasing index order, so among the
        shortest paths the one through the lowest-indexed nodes wins.
        The search stops as soon as the sink is discovered, so nodes after it
        in breadth-first order are neither queued nor given a parent.

        Returns:
            Path, or None if the sink is unreachable
        """
        source, sink = self._source, self._sink
        parents = [-1] * self.size
        order = [source]
        queue = deque([source])

        while queue and parents[sink] == -1:
            current = queue.popleft()

            for neighbor in np.flatnonzero(self._residual[current] > 0):
                neighbor = int(neighbor)
                if neighbor == source or parents[neighbor] != -1:
                    continue

                parents[neighbor] = current
                order.append(neighbor)
                queue.append(neighbor)

                if neighbor == sink:
                    break

        path = None
        if parents[sink] != -1:
            path = Path.from_parents(parents, source, sink)

        self.observer.on_search(self, path, order, parents)
        return path

    def _get_bottleneck(self, path):
        """Smallest residual capacity along the path"""
        return min(int(self._residual[edge.start, edge.end]) for edge in path)

    def _update_flow(self, path, bottleneck):
        for start, end in path:
            # Original edges gain flow, reversed ones cancel it
            if self._capacity[start, end] > 0:
                self._flow[start, end] += bottleneck
            else:
                self._flow[end, start] -= bottleneck

    def _update_residual(self, path, bottleneck):
        for start, end in path:
            self._residual[start, end] -= bottleneck
            self._residual[end, start] += bottleneck

    def _total_flow(self):
        return sum(int(value) for value in self._flow[:, self._sink])


def _validate_capacity(capacity):
    """
    Check a capacity matrix and return it as an int64 numpy array.

    Raises:
        InvalidGraphError: If the matrix is empty, not square, holds a
            non-integer or negative entry, has a node whose total outgoing or
            incoming capacity does not fit in int64, or has a pair of
            opposite edges
    """
    if capacity is None:
        raise InvalidGraphError("Capacity matrix is missing")

    if isinstance(capacity, np.ndarray) and capacity.ndim != 2:
        raise InvalidGraphError(f"Capacity matrix must be two-dimensional, got {capacity.ndim} dimensions")

    rows = list(capacity)
    size = len(rows)
    if size == 0:
        raise InvalidGraphError("Capacity matrix is empty")

    row_totals = [0] * size
    column_totals = [0] * size

    for i, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not hasattr(row, "__len__"):
            raise InvalidGraphError(f"Capacity matrix row {i} is not a sequence: {row!r}")
        if len(row) != size:
            raise InvalidGraphError(f"Capacity matrix is not square: row {i} has {len(row)} entries, expected {size}")
        for j, value in enumerate(row):
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
                raise InvalidGraphError(f"Capacity at ({i}, {j}) is not an integer: {value!r}")
            if value < 0:
                raise InvalidGraphError(f"Capacity at ({i}, {j}) is negative: {value}")
            if value > MAX_CAPACITY:
                raise InvalidGraphError(f"Capacity at ({i}, {j}) exceeds {MAX_CAPACITY}: {value}")
            row_totals[i] += int(value)
            column_totals[j] += int(value)

    # Flow and residual cells are bounded by these totals
    for node in range(size):
        if row_totals[node] > MAX_CAPACITY:
            raise InvalidGraphError(f"Total capacity leaving node {node} exceeds {MAX_CAPACITY}")
        if column_totals[node] > MAX_CAPACITY:
            raise InvalidGraphError(f"Total capacity entering node {node} exceeds {MAX_CAPACITY}")

    matrix = np.array(rows, dtype=np.int64)

    # Reverse cells hold backward residual capacity, so opposite edges cannot coexist
    opposite = np.argwhere((matrix > 0) & (matrix.T > 0))
    if len(opposite):
        i, j = opposite[0]
        raise InvalidGraphError(f"Edges {i}->{j} and {j}->{i} both have positive capacity")

    return matrix


def _validate_index(index, size, name):
    if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
        raise InvalidGraphError(f"The {name} index must be an integer, got {index!r}")
    if index < 0 or index >= size:
        raise InvalidGraphError(f"The {name} index {index} is outside [0, {size})")
    return int(index)


if __name__ == "__main__":
    network = FlowNetwork([[0, 1], [0, 0]], 0, 1)
    print(f"Maximum flow: {network.compute_max_flow()}")
    print(network.get_flow_graph())
