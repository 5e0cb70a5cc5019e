class FlowGraph:
    def __init__(self, name, capacity, source, sink, labels=None, positions=None, node_groups=None):
        self.name = name
        self.capacity = capacity
        self.source = source
        self.sink = sink
        self.labels = labels
        self.positions = positions
        self.node_groups = node_groups
        self.title = f"{name} - Max Flow"
        self.filename = f"{name.lower().replace(' ', '_')}_flow.png"

# Single edge
single_edge = FlowGraph(
    name="Single Edge",
    capacity=[[0, 1],
              [0, 0]],
    source=0,
    sink=1,
    positions={0: (0, 0), 1: (1, 0)}
)

# Triangle: one direct edge and one detour, solved for three source/sink pairs
triangle_positions = {0: (0, 0), 1: (1, 1), 2: (2, 0)}
triangle_capacity = [[0, 1, 1],
                     [0, 0, 1],
                     [0, 0, 0]]

triangle_0_1 = FlowGraph(
    name="Triangle 0 to 1",
    capacity=triangle_capacity,
    source=0,
    sink=1,
    positions=triangle_positions
)

triangle_0_2 = FlowGraph(
    name="Triangle 0 to 2",
    capacity=triangle_capacity,
    source=0,
    sink=2,
    positions=triangle_positions
)

triangle_1_2 = FlowGraph(
    name="Triangle 1 to 2",
    capacity=triangle_capacity,
    source=1,
    sink=2,
    positions=triangle_positions
)

# Diamond with a cross edge 2 -> 1
diamond_positions = {0: (0, 1), 1: (1, 2), 2: (1, 0), 3: (2, 1)}
diamond_capacity = [[0, 1, 2, 0],
                    [0, 0, 0, 2],
                    [0, 1, 0, 1],
                    [0, 0, 0, 0]]

diamond = FlowGraph(
    name="Diamond",
    capacity=diamond_capacity,
    source=0,
    sink=3,
    positions=diamond_positions,
    node_groups={
        'Source': ([0], 'gold'),
        'Intermediate': ([1, 2], 'skyblue'),
        'Sink': ([3], 'purple')
    }
)

diamond_from_2 = FlowGraph(
    name="Diamond From 2",
    capacity=diamond_capacity,
    source=2,
    sink=3,
    positions=diamond_positions
)

# Same shape with large capacities; the cross edge carries a single unit
diamond_large = FlowGraph(
    name="Diamond Large Capacity",
    capacity=[[0, 100, 100, 0],
              [0, 0, 0, 101],
              [0, 1, 0, 99],
              [0, 0, 0, 0]],
    source=0,
    sink=3,
    positions=diamond_positions,
    node_groups={
        'Source': ([0], 'gold'),
        'Intermediate': ([1, 2], 'skyblue'),
        'Sink': ([3], 'purple')
    }
)

all_graphs = [
    single_edge,
    triangle_0_1,
    triangle_0_2,
    triangle_1_2,
    diamond,
    diamond_from_2,
    diamond_large,
]
