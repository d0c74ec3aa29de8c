"""Rank assignment: cycle breaking and longest-path layering."""

import networkx as nx

from dagflow.models.graph import DagGraph


def build_digraph(graph: DagGraph) -> nx.DiGraph:
    """Adjacency of a graph in declared order.

    Duplicate node ids collapse into one vertex; self-loops and edges to
    unknown ids carry no ranking information and are skipped.
    """
    g = nx.DiGraph()
    for node in graph.nodes:
        g.add_node(node.id)
    for edge in graph.edges:
        if edge.source == edge.target:
            continue
        if edge.source in g and edge.target in g:
            g.add_edge(edge.source, edge.target)
    return g


def find_back_edges(g: nx.DiGraph) -> list[tuple[str, str]]:
    """Back edges of a depth-first search started from each node in order."""
    visited: set[str] = set()
    on_stack: set[str] = set()
    back_edges: list[tuple[str, str]] = []

    for root in g.nodes:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(g.successors(root)))]
        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                on_stack.discard(node)
            elif child in on_stack:
                back_edges.append((node, child))
            elif child not in visited:
                visited.add(child)
                on_stack.add(child)
                stack.append((child, iter(g.successors(child))))
    return back_edges


def break_cycles(g: nx.DiGraph) -> tuple[nx.DiGraph, list[tuple[str, str]]]:
    """Copy of ``g`` with every DFS back edge reversed, which makes it acyclic."""
    back_edges = find_back_edges(g)
    reversed_set = set(back_edges)

    dag = nx.DiGraph()
    dag.add_nodes_from(g.nodes)
    for source, target in g.edges:
        if (source, target) in reversed_set:
            dag.add_edge(target, source)
        else:
            dag.add_edge(source, target)
    return dag, back_edges


def longest_path_ranks(dag: nx.DiGraph) -> dict[str, int]:
    """Rank = longest-path distance from a source.

    Relaxation passes are capped at the node count, so a graph that still
    contains a cycle ends with finite, best-effort ranks instead of looping.
    """
    ranks = {node: 0 for node in dag.nodes}
    edges = list(dag.edges)
    for _ in range(max(1, dag.number_of_nodes())):
        changed = False
        for source, target in edges:
            if ranks[target] < ranks[source] + 1:
                ranks[target] = ranks[source] + 1
                changed = True
        if not changed:
            break
    return ranks


def rank_nodes(graph: DagGraph) -> dict[str, int]:
    """Assign every node id an integer rank."""
    dag, _ = break_cycles(build_digraph(graph))
    return longest_path_ranks(dag)
