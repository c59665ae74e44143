import logging
from itertools import islice

import networkx as nx
from networkx.algorithms.community import girvan_newman, modularity

log = logging.getLogger(__name__)

# hierarchy levels examined at most, and levels allowed without a better score
MAX_LEVELS = 50
PATIENCE = 3


def collapse_to_undirected(graph):
    """Drop edge direction, summing the weights of parallel and reciprocal edges."""
    undirected = nx.Graph()
    undirected.add_nodes_from(graph.nodes(data=True))

    for u, v, data in graph.edges(data=True):
        weight = data.get("weight", 1.0)
        if undirected.has_edge(u, v):
            undirected[u][v]["weight"] += weight
        else:
            undirected.add_edge(u, v, weight=weight)

    return undirected


def detect_communities(graph, max_levels=MAX_LEVELS, patience=PATIENCE):
    """Girvan-Newman split of an undirected graph.

    Each level of the edge-betweenness hierarchy is scored by weighted
    modularity and the best one is kept. The walk stops after ``max_levels``
    levels, or once ``patience`` levels in a row fail to beat the best score.
    Returns a list of node sets, largest first.
    """
    if graph.number_of_nodes() == 0:
        return []

    if graph.number_of_edges() == 0:
        return [{node} for node in graph.nodes]

    best = [set(c) for c in nx.connected_components(graph)]
    best_score = modularity(graph, best, weight="weight")

    stale = 0
    for level in islice(girvan_newman(graph), max_levels):
        communities = [set(c) for c in level]
        score = modularity(graph, communities, weight="weight")
        if score > best_score:
            best, best_score = communities, score
            stale = 0
        else:
            stale += 1
            if stale >= patience:
                break

    log.info("Found %d communities (modularity=%.3f)", len(best), best_score)
    return sorted(best, key=len, reverse=True)


def community_membership(communities):
    return {node: index for index, members in enumerate(communities) for node in members}
