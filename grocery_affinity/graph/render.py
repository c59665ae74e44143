import logging
from pathlib import Path

import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
import plotly.graph_objects as go

from grocery_affinity import config
from grocery_affinity.graph.communities import community_membership

log = logging.getLogger(__name__)

SEED = 42


def _labels(graph):
    labels = {}
    for node, label in graph.nodes(data="label"):
        labels[node] = str(node) if pd.isna(label) else label
    return labels


def _empty_figure(title):
    fig, ax = plt.subplots(figsize=(8, 6))
    ax.set_title(title)
    ax.axis("off")
    log.warning("Graph is empty, nothing to draw")
    return fig


# ============================================================
# Static (matplotlib)
# ============================================================

def draw_rule_graph(graph, title="Association Rules"):
    if graph.number_of_nodes() == 0:
        return _empty_figure(title)

    fig, ax = plt.subplots(figsize=(14, 10))
    pos = nx.spring_layout(graph, k=0.7, seed=SEED)
    widths = [data["weight"] for _, _, data in graph.edges(data=True)]

    nx.draw_networkx_nodes(graph, pos, ax=ax, node_size=900, node_color="lightsteelblue")
    nx.draw_networkx_labels(graph, pos, labels=_labels(graph), ax=ax, font_size=8)
    nx.draw_networkx_edges(
        graph, pos, ax=ax,
        width=widths,
        arrows=True,
        arrowstyle="-|>",
        arrowsize=14,
        edge_color="grey",
        alpha=0.6,
    )

    ax.set_title(title)
    ax.axis("off")
    return fig


def draw_communities(graph, communities, title="Product Communities"):
    if graph.number_of_nodes() == 0:
        return _empty_figure(title)

    membership = community_membership(communities)
    cmap = plt.get_cmap("tab20")
    colors = [cmap(membership.get(node, 0) % cmap.N) for node in graph.nodes]
    widths = [data["weight"] for _, _, data in graph.edges(data=True)]

    fig, ax = plt.subplots(figsize=(14, 10))
    pos = nx.spring_layout(graph, k=0.7, seed=SEED)

    nx.draw_networkx_nodes(graph, pos, ax=ax, node_size=900, node_color=colors)
    nx.draw_networkx_labels(graph, pos, labels=_labels(graph), ax=ax, font_size=8)
    nx.draw_networkx_edges(graph, pos, ax=ax, width=widths, edge_color="grey", alpha=0.5)

    ax.set_title(f"{title} ({len(communities)} clusters)")
    ax.axis("off")
    return fig


# ============================================================
# Interactive (plotly)
# ============================================================

def interactive_rule_graph(graph, scale=config.INTERACTIVE_EDGE_SCALE, title="Association Rules"):
    pos = nx.spring_layout(graph, k=0.7, seed=SEED) if graph.number_of_nodes() else {}
    labels = _labels(graph)

    arrows = []
    mid_x, mid_y, mid_text = [], [], []
    for u, v, data in graph.edges(data=True):
        x0, y0 = pos[u]
        x1, y1 = pos[v]
        arrows.append(dict(
            x=x1, y=y1, ax=x0, ay=y0,
            xref="x", yref="y", axref="x", ayref="y",
            showarrow=True,
            arrowhead=2,
            arrowwidth=max(data["confidence"] * scale, 0.5),
            arrowcolor="rgba(120, 120, 120, 0.5)",
        ))
        mid_x.append((x0 + x1) / 2)
        mid_y.append((y0 + y1) / 2)
        mid_text.append(f"{labels[u]} → {labels[v]}<br>confidence: {data['confidence']:.3f}")

    edge_trace = go.Scatter(
        x=mid_x, y=mid_y,
        mode="markers",
        marker=dict(size=6, opacity=0),
        hoverinfo="text",
        text=mid_text,
    )

    nodes = list(graph.nodes)
    node_trace = go.Scatter(
        x=[pos[n][0] for n in nodes],
        y=[pos[n][1] for n in nodes],
        mode="markers+text",
        text=[labels[n] for n in nodes],
        textposition="top center",
        hovertext=[f"{labels[n]} (id {n})" for n in nodes],
        hoverinfo="text",
        marker=dict(size=18, color="lightsteelblue", line=dict(width=1, color="white")),
    )

    fig = go.Figure(data=[edge_trace, node_trace])
    fig.update_layout(
        title=title,
        showlegend=False,
        hovermode="closest",
        annotations=arrows,
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
    )
    if not nodes:
        log.warning("Graph is empty, nothing to draw")
    return fig


def save_figure(fig, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(fig, go.Figure):
        fig.write_html(str(path.with_suffix(".html")))
        return path.with_suffix(".html")

    fig.savefig(path.with_suffix(".png"), bbox_inches="tight")
    plt.close(fig)
    return path.with_suffix(".png")
