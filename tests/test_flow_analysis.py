import numpy as np
import pytest

from flow_analysis import (ConsoleObserver, analyze_flow_graph, build_flow_digraph,
                           format_matrix, networkx_max_flow, print_flow_results,
                           visualize_flow)
from flow_network import FlowNetwork
from graph_configs import all_graphs, diamond

EXPECTED_MAX_FLOW = {
    "Single Edge": 1,
    "Triangle 0 to 1": 1,
    "Triangle 0 to 2": 2,
    "Triangle 1 to 2": 1,
    "Diamond": 3,
    "Diamond From 2": 2,
    "Diamond Large Capacity": 200,
}


def test_format_matrix():
    assert format_matrix([[0, 1], [12, 2**31 - 1]]) == "{   0    1 }\n{  12  inf }"


@pytest.mark.parametrize("graph", all_graphs, ids=lambda g: g.name)
def test_demo_graphs(graph):
    network = FlowNetwork(graph.capacity, graph.source, graph.sink)
    assert network.compute_max_flow() == EXPECTED_MAX_FLOW[graph.name]
    assert networkx_max_flow(network) == EXPECTED_MAX_FLOW[graph.name]


def test_agrees_with_networkx_on_random_graphs(random_networks):
    for network in random_networks(count=60, seed=11):
        assert network.compute_max_flow() == networkx_max_flow(network)


def test_build_flow_digraph():
    network = FlowNetwork([[0, 1, 1], [0, 0, 1], [0, 0, 0]], 0, 2)
    network.compute_max_flow()
    G = build_flow_digraph(network, labels=["s", "a", "t"])

    assert sorted(G.nodes()) == [0, 1, 2]
    assert G.nodes[0]["label"] == "s"
    assert sorted(G.edges()) == [(0, 1), (0, 2), (1, 2)]
    assert G[1][2] == {"capacity": 1, "flow": 1}


def test_build_flow_digraph_keeps_isolated_nodes():
    network = FlowNetwork(np.zeros((3, 3), dtype=np.int64), 0, 2)
    G = build_flow_digraph(network)
    assert G.number_of_nodes() == 3
    assert G.number_of_edges() == 0
    assert networkx_max_flow(network) == 0


def test_print_flow_results(capsys):
    network = FlowNetwork([[0, 1], [0, 0]], 0, 1)
    network.compute_max_flow()
    print_flow_results(build_flow_digraph(network, labels=["s", "t"]))
    assert "s -> t: 1/1" in capsys.readouterr().out


def test_console_observer_trace(capsys):
    network = FlowNetwork([[0, 1], [0, 0]], 0, 1, observer=ConsoleObserver())
    network.compute_max_flow()
    out = capsys.readouterr().out

    assert "Flow from 0 to 1 in graph:" in out
    assert "Queue:   0 1" in out
    assert "Parents: -1 0" in out
    assert "Path: 0->1" in out
    assert "Min Cost: 1" in out
    assert "No augmenting path" in out
    assert out.rstrip().endswith("Max Flow: 1")


def test_visualize_flow_saves_image(tmp_path):
    network = FlowNetwork(diamond.capacity, diamond.source, diamond.sink)
    network.compute_max_flow()
    G = build_flow_digraph(network)
    save_path = tmp_path / "images" / "diamond.png"

    fig = visualize_flow(G, diamond.positions, diamond.title, diamond.node_groups,
                         save_path=str(save_path), show=False)
    assert fig is not None
    assert save_path.exists()


def test_analyze_flow_graph(tmp_path, capsys):
    flow_value, network = analyze_flow_graph(diamond, verbose=False, image_dir=str(tmp_path))
    assert flow_value == 3
    assert network.get_max_flow() == 3
    assert (tmp_path / diamond.filename).exists()

    out = capsys.readouterr().out
    assert "Diamond ANALYSIS" in out
    assert "WARNING" not in out
