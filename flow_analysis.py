import networkx as nx
from networkx.algorithms.flow import edmonds_karp
import matplotlib.pyplot as plt
import numpy as np
import os

from flow_network import FlowNetwork, FlowObserver
from graph_configs import all_graphs

# Capacities this large are printed as infinite
INFINITE_CAPACITY = 2**31 - 1


def format_matrix(matrix):
    """Render a matrix one row per line, e.g. '{   0    1 }'"""
    lines = []
    for row in np.asarray(matrix):
        cells = [" inf " if value >= INFINITE_CAPACITY else f"{value:4d} " for value in row]
        lines.append("{" + "".join(cells) + "}")
    return "\n".join(lines)


class ConsoleObserver(FlowObserver):
    """
    Prints every step of a max flow computation: the reset matrices,
    each breadth-first search, the chosen path with its bottleneck and
    the updated flow and residual matrices.
    """
    def __init__(self, labels=None):
        self.labels = labels

    def _name(self, node):
        return self.labels[node] if self.labels else str(node)

    def on_reset(self, network):
        print(f"Flow from {self._name(network.source)} to {self._name(network.sink)} in graph:")
        print(format_matrix(network.capacity))
        print("\nFlow Graph:")
        print(format_matrix(network.get_flow_graph()))
        print("\nResidual Graph:")
        print(format_matrix(network.residual_graph))

    def on_search(self, network, path, order, parents):
        print("\nQueue:   " + " ".join(str(node) for node in order))
        print("Parents: " + " ".join(str(parent) for parent in parents))
        if path is None:
            print("No augmenting path")

    def on_augment(self, network, path, bottleneck):
        print("\nPath: " + "->".join(self._name(node) for node in path.nodes()))
        print(f"Min Cost: {bottleneck}")
        print("\nFlow Graph:")
        print(format_matrix(network.get_flow_graph()))
        print("\nResidual Graph:")
        print(format_matrix(network.residual_graph))

    def on_finish(self, network):
        print(f"\nMax Flow: {network.get_max_flow()}")


def build_flow_digraph(network, labels=None):
    """
    Convert a FlowNetwork into a networkx DiGraph.

    Every node index becomes a graph node (with a 'label' attribute) and
    every positive capacity cell an edge carrying 'capacity' and the
    current 'flow'.

    Args:
        network: FlowNetwork, computed or not
        labels: Optional list of node names indexed like the matrix

    Returns:
        networkx DiGraph
    """
    capacity = network.capacity
    flow = network.get_flow_graph()

    G = nx.DiGraph()
    for node in range(network.size):
        G.add_node(node, label=labels[node] if labels else str(node))

    for u, v in np.argwhere(capacity > 0):
        G.add_edge(int(u), int(v), capacity=int(capacity[u, v]), flow=int(flow[u, v]))

    return G


def networkx_max_flow(network):
    """Max flow value of the same graph computed by networkx's Edmonds-Karp"""
    G = build_flow_digraph(network)
    flow_value, _ = nx.maximum_flow(G, network.source, network.sink, flow_func=edmonds_karp)
    return int(flow_value)


def print_flow_results(G):
    print("\nFlow on each edge:")
    for u, v, data in G.edges(data=True):
        print(f"{G.nodes[u]['label']} -> {G.nodes[v]['label']}: {data['flow']}/{data['capacity']}")


def visualize_flow(G, pos=None, title="Max Flow Network", node_groups=None, save_path=None, show=True):
    """
    Draw a flow digraph with 'flow/capacity' edge labels.

    Args:
        G: DiGraph from build_flow_digraph
        pos: Optional {node: (x, y)} positions, spring layout otherwise
        title: Plot title
        node_groups: Optional {group name: (nodes, color)} for a coloured legend
        save_path: Save the figure there if given
        show: Open a window with the plot

    Returns:
        The matplotlib figure
    """
    fig = plt.figure(figsize=(12, 8))

    # If no positions are provided, use spring layout
    if pos is None:
        pos = nx.spring_layout(G)

    if node_groups is None:
        nx.draw_networkx_nodes(G, pos, node_size=1500, node_color='lightblue')
    else:
        for group_name, (nodes, color) in node_groups.items():
            nx.draw_networkx_nodes(G, pos, nodelist=[n for n in nodes if n in G.nodes()],
                                   node_color=color, node_size=1500, label=group_name)
        plt.legend(loc='upper right')

    # Edges carrying flow are drawn thick and red
    edges_with_flow = [(u, v) for u, v, d in G.edges(data=True) if d['flow'] > 0]
    edges_no_flow = [(u, v) for u, v, d in G.edges(data=True) if d['flow'] <= 0]
    nx.draw_networkx_edges(G, pos, edgelist=edges_no_flow, width=1, alpha=0.4,
                           edge_color='gray', arrows=True)
    nx.draw_networkx_edges(G, pos, edgelist=edges_with_flow, width=2.5,
                           edge_color='red', arrows=True)

    nx.draw_networkx_labels(G, pos, labels=nx.get_node_attributes(G, 'label'),
                            font_size=12, font_weight='bold')

    edge_labels = {(u, v): f"{d['flow']}/{d['capacity']}" for u, v, d in G.edges(data=True)}
    nx.draw_networkx_edge_labels(G, pos, edge_labels=edge_labels, font_size=10)

    plt.title(title)
    plt.axis('off')
    plt.tight_layout()

    if save_path:
        save_dir = os.path.dirname(save_path)
        if save_dir:
            os.makedirs(save_dir, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    if show:
        plt.show()
    else:
        plt.close(fig)

    return fig


def analyze_flow_graph(graph, verbose=True, image_dir=None):
    """
    Run one FlowGraph config: compute, cross-check with networkx, print
    the edge flows and optionally save a drawing.

    Returns:
        Tuple of (max flow value, FlowNetwork)
    """
    print(f"\n{graph.name} ANALYSIS")
    observer = ConsoleObserver(graph.labels) if verbose else None
    network = FlowNetwork(graph.capacity, graph.source, graph.sink, observer=observer)
    flow_value = network.compute_max_flow()

    print(f"Maximum flow: {flow_value}")
    expected = networkx_max_flow(network)
    if expected != flow_value:
        print(f"WARNING: networkx reports {expected}")

    G = build_flow_digraph(network, graph.labels)
    print_flow_results(G)

    if image_dir:
        visualize_flow(G, graph.positions, graph.title, graph.node_groups,
                       save_path=os.path.join(image_dir, graph.filename), show=False)

    return flow_value, network


if __name__ == "__main__":
    for graph in all_graphs:
        analyze_flow_graph(graph)
