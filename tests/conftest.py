import matplotlib
import numpy as np
import pytest

from flow_network import FlowNetwork

# Tests never open plot windows
matplotlib.use("Agg")


def random_capacity(rng, size, density=0.5, max_capacity=5):
    """Random matrix with at most one direction per node pair and no self loops."""
    capacity = np.zeros((size, size), dtype=np.int64)
    for i in range(size):
        for j in range(i + 1, size):
            if rng.random() < density:
                value = int(rng.integers(1, max_capacity + 1))
                if rng.random() < 0.5:
                    capacity[i, j] = value
                else:
                    capacity[j, i] = value
    return capacity


@pytest.fixture
def random_networks():
    """Factory of seeded random networks from node 0 to the last node."""
    def make(count=40, seed=7):
        rng = np.random.default_rng(seed)
        networks = []
        for _ in range(count):
            size = int(rng.integers(2, 9))
            networks.append(FlowNetwork(random_capacity(rng, size), 0, size - 1))
        return networks
    return make
