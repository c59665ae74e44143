# dataset_generator.py
import argparse
import csv
import random
from pathlib import Path

import numpy as np
from faker import Faker

# ============================================================
# PRESETS
# ============================================================

PRESETS = {
    # Safe for quick verification (fast run)
    "TEST": {
        "num_products": 200,
        "num_aisles": 20,
        "num_departments": 8,
        "num_orders": 2000,
        "num_affinity_pairs": 15,
    },
    # Big enough for Spark to be worth it, still laptop-safe
    "SUBMISSION": {
        "num_products": 3000,
        "num_aisles": 134,
        "num_departments": 21,
        "num_orders": 200000,
        "num_affinity_pairs": 120,
    },
}

PRODUCT_COLUMNS = ["product_id", "product_name", "aisle_id", "department_id"]
ORDER_ITEM_COLUMNS = ["order_id", "product_id", "add_to_cart_order", "reordered"]

# probability that an order contains one of the planted pairs
AFFINITY_RATE = 0.35
MEAN_BASKET_SIZE = 6


def get_preset(name):
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(f"PRESET must be one of {sorted(PRESETS)}, got {name!r}")


# ============================================================
# Product Generation
# ============================================================

def generate_products(fake, num_products, num_aisles, num_departments):
    products = []
    seen = set()

    for prod_id in range(1, num_products + 1):
        name = fake.catch_phrase().title()
        # keep names unique so labels stay readable on the graph
        while name in seen:
            name = f"{name} {fake.color_name()}"
        seen.add(name)

        products.append({
            "product_id": prod_id,
            "product_name": name,
            "aisle_id": random.randint(1, num_aisles),
            "department_id": random.randint(1, num_departments),
        })

    return products


def popularity_weights(num_products):
    """Long-tailed product popularity, a few staples and many rarely bought items."""
    ranks = np.arange(1, num_products + 1)
    weights = 1.0 / ranks ** 0.8
    np.random.shuffle(weights)
    return weights / weights.sum()


def plant_affinities(product_ids, num_pairs):
    return [tuple(random.sample(product_ids, 2)) for _ in range(num_pairs)]


# ============================================================
# Order Generation
# ============================================================

def generate_order_items(product_ids, num_orders, affinity_pairs, weights):
    rows = []
    reorder_history = set()

    for order_id in range(1, num_orders + 1):
        basket_size = max(1, np.random.poisson(MEAN_BASKET_SIZE))
        basket = []

        if affinity_pairs and random.random() < AFFINITY_RATE:
            basket.extend(random.choice(affinity_pairs))

        for product_id in np.random.choice(product_ids, size=basket_size, p=weights):
            product_id = int(product_id)
            if product_id not in basket:
                basket.append(product_id)

        for position, product_id in enumerate(basket, start=1):
            reordered = 1 if product_id in reorder_history else 0
            reorder_history.add(product_id)
            rows.append({
                "order_id": order_id,
                "product_id": product_id,
                "add_to_cart_order": position,
                "reordered": reordered,
            })

        if order_id % 50000 == 0:
            print(f"Progress: {order_id:,}/{num_orders:,} orders")

    return rows


# ============================================================
# Export
# ============================================================

def write_csv(path, rows, columns):
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        writer.writerows(rows)


def generate(out_dir, preset="TEST", seed=42):
    settings = get_preset(preset)

    # Seeds (reproducible)
    np.random.seed(seed)
    random.seed(seed)
    Faker.seed(seed)
    fake = Faker()

    print(
        f"Preset={preset} | Products={settings['num_products']:,} | "
        f"Orders={settings['num_orders']:,} | Pairs={settings['num_affinity_pairs']:,}"
    )

    products = generate_products(
        fake,
        settings["num_products"],
        settings["num_aisles"],
        settings["num_departments"],
    )
    print(f"Generated {len(products)} products")

    product_ids = [p["product_id"] for p in products]
    pairs = plant_affinities(product_ids, settings["num_affinity_pairs"])
    order_items = generate_order_items(
        product_ids,
        settings["num_orders"],
        pairs,
        popularity_weights(len(product_ids)),
    )

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    products_path = out_dir / "products.csv"
    order_items_path = out_dir / "order_products__prior.csv"

    write_csv(products_path, products, PRODUCT_COLUMNS)
    write_csv(order_items_path, order_items, ORDER_ITEM_COLUMNS)

    print(f"""
Dataset generation complete!
- Orders: {settings['num_orders']:,}
- Order items: {len(order_items):,}
- Products: {len(products):,}
- Planted pairs: {len(pairs):,}
""")
    return products_path, order_items_path


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--out-dir", default="data", help="folder for products.csv and order_products__prior.csv")
    ap.add_argument("--preset", default="TEST", help="TEST or SUBMISSION")
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args(argv)

    generate(args.out_dir, args.preset, args.seed)


if __name__ == "__main__":
    main()
