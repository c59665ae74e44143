import logging

import networkx as nx
import pandas as pd

from grocery_affinity import config
from grocery_affinity.spark.ingest import catalog_lookup

log = logging.getLogger(__name__)

EDGE_COLUMNS = ["antecedent", "consequent", "confidence"]


def flatten_rules(rules):
    """Turn single-item rules into a plain (antecedent, consequent, confidence) edge list.

    Rules with more than one product on either side cannot be drawn as a
    single edge and are dropped.
    """
    antecedents = list(rules["antecedent"])
    consequents = list(rules["consequent"])
    confidences = list(rules["confidence"])

    rows = []
    for antecedent, consequent, confidence in zip(antecedents, consequents, confidences):
        if len(antecedent) == 1 and len(consequent) == 1:
            rows.append((antecedent[0], consequent[0], float(confidence)))

    dropped = len(confidences) - len(rows)
    if dropped:
        log.info("Dropped %d multi-item rules from the edge list", dropped)

    return pd.DataFrame(rows, columns=EDGE_COLUMNS).infer_objects()


def build_nodes(edges, catalog):
    """Distinct products seen in any rule, labelled from the catalog."""
    names = catalog_lookup(catalog)

    ids = pd.concat([edges["antecedent"], edges["consequent"]], ignore_index=True) \
        .drop_duplicates() \
        .tolist()

    # unknown ids and blank catalog names both map to None; object dtype keeps it None
    labels = [names.get(product_id) for product_id in ids]
    labels = pd.Series([None if pd.isna(label) else label for label in labels], dtype=object)
    return pd.DataFrame({"id": ids, "label": labels})


def build_rule_graph(nodes, edges, scale=config.STATIC_EDGE_SCALE):
    graph = nx.MultiDiGraph()

    for product_id, label in zip(nodes["id"], nodes["label"]):
        graph.add_node(product_id, label=label)

    for antecedent, consequent, confidence in edges[EDGE_COLUMNS].itertuples(index=False):
        graph.add_edge(antecedent, consequent, confidence=confidence, weight=confidence * scale)

    log.info("Rule graph: %d nodes, %d edges", graph.number_of_nodes(), graph.number_of_edges())
    return graph


def rule_graph(rules, catalog, scale=config.STATIC_EDGE_SCALE):
    edges = flatten_rules(rules)
    nodes = build_nodes(edges, catalog)
    return build_rule_graph(nodes, edges, scale)
