# pipeline.py
import argparse
import logging
from pathlib import Path

import matplotlib.pyplot as plt

from grocery_affinity import config
from grocery_affinity.graph.build import rule_graph
from grocery_affinity.graph.communities import collapse_to_undirected, detect_communities
from grocery_affinity.graph.render import (
    draw_communities,
    draw_rule_graph,
    interactive_rule_graph,
    save_figure,
)
from grocery_affinity.spark.ingest import load_catalog, load_order_items
from grocery_affinity.spark.rules import (
    association_rules,
    build_baskets,
    collect_rules,
    fit_fpgrowth,
    frequent_itemsets,
    release,
    save_json,
    show_report,
)
from grocery_affinity.spark.session import spark_session

log = logging.getLogger(__name__)


def build_parser():
    ap = argparse.ArgumentParser(description="Mine grocery association rules and draw them as a graph")
    ap.add_argument("--order-items", default=str(config.ORDER_ITEMS_PATH), help="CSV with order_id,product_id")
    ap.add_argument("--products", default=str(config.PRODUCTS_PATH), help="CSV with product_id,product_name")
    ap.add_argument("--min-support", type=float, default=config.MIN_SUPPORT)
    ap.add_argument("--min-confidence", type=float, default=config.MIN_CONFIDENCE)
    ap.add_argument("--num-partitions", type=int, default=None, help="FP-growth partitions")
    ap.add_argument("--master", default=config.SPARK_MASTER, help="Spark master URL")
    ap.add_argument("--top", type=int, default=config.TOP_N_RULES, help="how many rules to print")
    ap.add_argument("--out-dir", default=None, help="save rules and figures here instead of showing them")
    ap.add_argument("--interactive", action="store_true", help="also build the plotly rule graph")
    ap.add_argument("--no-communities", action="store_true", help="skip community detection")
    ap.add_argument("--verbose", action="store_true")
    return ap


def mine(spark, args):
    """Ingest, aggregate and mine; returns the rules collected locally."""
    order_items_df = load_order_items(spark, args.order_items)
    baskets_df = build_baskets(order_items_df).cache()

    model = fit_fpgrowth(
        baskets_df,
        min_support=args.min_support,
        min_confidence=args.min_confidence,
        num_partitions=args.num_partitions,
    )
    rules_df = association_rules(model).cache()
    itemsets_df = frequent_itemsets(model, min_size=2)

    try:
        show_report(baskets_df, rules_df, itemsets_df, args.top)

        if args.out_dir:
            save_json(rules_df, Path(args.out_dir) / "association_rules")
            save_json(itemsets_df, Path(args.out_dir) / "frequent_itemsets")

        return collect_rules(rules_df)
    finally:
        release(model, rules_df, baskets_df)


def present(rules, catalog, args):
    figures = {}

    graph = rule_graph(rules, catalog, scale=config.STATIC_EDGE_SCALE)
    figures["rule_graph"] = draw_rule_graph(graph)

    if args.interactive:
        figures["rule_graph_interactive"] = interactive_rule_graph(graph, scale=config.INTERACTIVE_EDGE_SCALE)

    communities = []
    if not args.no_communities:
        undirected = collapse_to_undirected(graph)
        communities = detect_communities(undirected)
        figures["communities"] = draw_communities(undirected, communities)

    return graph, communities, figures


def run(args):
    for path in (args.order_items, args.products):
        if "://" not in path and not Path(path).exists():
            raise SystemExit(f"Input file not found: {path}")

    catalog = load_catalog(args.products)

    with spark_session(config.APP_NAME, args.master) as spark:
        rules = mine(spark, args)

    graph, communities, figures = present(rules, catalog, args)

    if args.out_dir:
        for name, fig in figures.items():
            saved = save_figure(fig, Path(args.out_dir) / name)
            log.info("Saved %s", saved)
    elif figures:
        plt.show()
        for fig in figures.values():
            if hasattr(fig, "write_html"):
                fig.show()

    return {"rules": rules, "graph": graph, "communities": communities}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )

    result = run(args)
    graph = result["graph"]
    print(
        f"✅ {len(result['rules']):,} rules → {graph.number_of_nodes():,} products, "
        f"{graph.number_of_edges():,} edges, {len(result['communities']):,} communities"
    )


if __name__ == "__main__":
    main()
