# config.py
import os
from pathlib import Path

# ============================================================
# CONFIGURATION
# ============================================================

APP_NAME = "GroceryProductAffinity"
SPARK_MASTER = os.environ.get("SPARK_MASTER", "local[*]")

DATA_DIR = Path(os.environ.get("GROCERY_DATA_DIR", "data"))
ORDER_ITEMS_PATH = DATA_DIR / "order_products__prior.csv"
PRODUCTS_PATH = DATA_DIR / "products.csv"

ORDER_COLUMNS = ("order_id", "product_id")
CATALOG_COLUMNS = ("product_id", "product_name")

# FP-growth thresholds
MIN_SUPPORT = 0.01
MIN_CONFIDENCE = 0.2

# Edge width multipliers (cosmetic only)
STATIC_EDGE_SCALE = 10
INTERACTIVE_EDGE_SCALE = 20

TOP_N_RULES = 20

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
LOG_DATEFMT = "%H:%M:%S"
