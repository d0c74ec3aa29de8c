"""Crossing reduction within ranks (barycenter heuristic)."""

from dataclasses import dataclass, field

import networkx as nx

VIRTUAL_PREFIX = "__virtual_"

# Down + up sweep pairs
MAX_SWEEPS = 8


@dataclass
class LayeredGraph:
    """A ranked graph where every edge joins adjacent ranks.

    Edges spanning several ranks are split by virtual nodes, one per
    intermediate rank; they take part in ordering but are not reported.
    """

    graph: nx.DiGraph
    ranks: dict[str, int]
    virtual: set[str] = field(default_factory=set)

    @property
    def rank_count(self) -> int:
        return max(self.ranks.values()) + 1 if self.ranks else 0

    def is_virtual(self, node_id: str) -> bool:
        return node_id in self.virtual


def split_long_edges(dag: nx.DiGraph, ranks: dict[str, int]) -> LayeredGraph:
    """Replace every edge spanning more than one rank by a chain of virtual nodes."""
    g = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    layered_ranks = dict(ranks)
    virtual: set[str] = set()

    for index, (source, target) in enumerate(dag.edges):
        span = ranks[target] - ranks[source]
        if span <= 1:
            g.add_edge(source, target)
            continue
        previous = source
        for step in range(1, span):
            virtual_id = f"{VIRTUAL_PREFIX}{index}_{step}"
            while virtual_id in g:
                virtual_id += "_"
            g.add_node(virtual_id)
            layered_ranks[virtual_id] = ranks[source] + step
            virtual.add(virtual_id)
            g.add_edge(previous, virtual_id)
            previous = virtual_id
        g.add_edge(previous, target)

    return LayeredGraph(graph=g, ranks=layered_ranks, virtual=virtual)


def initial_order(layered: LayeredGraph) -> list[list[str]]:
    """Group node ids by rank, keeping their declared (insertion) order."""
    layers: list[list[str]] = [[] for _ in range(layered.rank_count)]
    for node_id in layered.graph.nodes:
        layers[layered.ranks[node_id]].append(node_id)
    return layers


def count_crossings(layers: list[list[str]], g: nx.DiGraph) -> int:
    """Number of pairwise edge crossings between adjacent ranks."""
    total = 0
    for upper, lower in zip(layers, layers[1:]):
        lower_pos = {node_id: i for i, node_id in enumerate(lower)}
        segments = [
            (i, lower_pos[succ])
            for i, node_id in enumerate(upper)
            for succ in g.successors(node_id)
            if succ in lower_pos
        ]
        for a in range(len(segments)):
            for b in range(a + 1, len(segments)):
                (ua, la), (ub, lb) = segments[a], segments[b]
                if (ua - ub) * (la - lb) < 0:
                    total += 1
    return total


def _reorder(
    layer: list[str],
    neighbors_of,
    reference: list[str],
    declared_index: dict[str, int],
) -> list[str]:
    """Sort a layer by the mean position of each node's neighbors in ``reference``.

    Nodes without neighbors there keep their current index as weight. Equal
    weights fall back to the declared node order.
    """
    ref_pos = {node_id: i for i, node_id in enumerate(reference)}

    def weight(item: tuple[int, str]) -> tuple[float, int]:
        index, node_id = item
        positions = [ref_pos[n] for n in neighbors_of(node_id) if n in ref_pos]
        if not positions:
            return (float(index), declared_index[node_id])
        return (sum(positions) / len(positions), declared_index[node_id])

    return [node_id for _, node_id in sorted(enumerate(layer), key=weight)]


def order_layers(layered: LayeredGraph) -> list[list[str]]:
    """Order nodes within ranks to reduce crossings.

    Alternates downward sweeps (predecessor barycenters) and upward sweeps
    (successor barycenters) and keeps the ordering with the fewest crossings;
    the first ordering wins ties.
    """
    g = layered.graph
    layers = initial_order(layered)
    declared_index = {node_id: i for i, node_id in enumerate(g.nodes)}
    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, g)

    for _ in range(MAX_SWEEPS):
        if best_crossings == 0:
            break
        for i in range(1, len(layers)):
            layers[i] = _reorder(layers[i], g.predecessors, layers[i - 1], declared_index)
        for i in range(len(layers) - 2, -1, -1):
            layers[i] = _reorder(layers[i], g.successors, layers[i + 1], declared_index)

        crossings = count_crossings(layers, g)
        if crossings < best_crossings:
            best = [list(layer) for layer in layers]
            best_crossings = crossings
        else:
            break

    return best
