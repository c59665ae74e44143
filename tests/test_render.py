import networkx as nx
import plotly.graph_objects as go
from matplotlib.figure import Figure

from grocery_affinity.graph.build import rule_graph
from grocery_affinity.graph.communities import collapse_to_undirected, detect_communities
from grocery_affinity.graph.render import (
    draw_communities,
    draw_rule_graph,
    interactive_rule_graph,
    save_figure,
)


def test_draw_rule_graph(rules, catalog):
    fig = draw_rule_graph(rule_graph(rules, catalog))
    assert isinstance(fig, Figure)


def test_draw_empty_graph():
    fig = draw_rule_graph(nx.MultiDiGraph())
    assert isinstance(fig, Figure)


def test_draw_communities(rules, catalog):
    undirected = collapse_to_undirected(rule_graph(rules, catalog))
    fig = draw_communities(undirected, detect_communities(undirected))
    assert "clusters" in fig.axes[0].get_title()


def test_interactive_rule_graph(rules, catalog):
    graph = rule_graph(rules, catalog)
    fig = interactive_rule_graph(graph, scale=20)

    assert isinstance(fig, go.Figure)
    assert len(fig.layout.annotations) == graph.number_of_edges()
    assert fig.layout.annotations[0].arrowwidth == 20.0
    # node 99 is not in the catalog, its id is shown instead
    assert "99" in fig.data[1].text


def test_interactive_empty_graph():
    fig = interactive_rule_graph(nx.MultiDiGraph())
    assert len(fig.data[1].x) == 0


def test_save_figure(rules, catalog, tmp_path):
    graph = rule_graph(rules, catalog)
    png = save_figure(draw_rule_graph(graph), tmp_path / "rules")
    html = save_figure(interactive_rule_graph(graph), tmp_path / "rules")
    assert png.name == "rules.png" and png.exists()
    assert html.name == "rules.html" and html.exists()


def test_missing_labels_fall_back_to_id():
    graph = nx.MultiDiGraph()
    graph.add_node(1, label="Milk")
    graph.add_node(2, label=None)
    graph.add_node(3, label=float("nan"))
    graph.add_edge(1, 2, confidence=0.5, weight=5.0)
    graph.add_edge(1, 3, confidence=0.5, weight=5.0)

    fig = interactive_rule_graph(graph)
    assert fig.data[1].text == ("Milk", "2", "3")
