import logging

import pandas as pd
from pyspark.sql.functions import col
from pyspark.sql.types import LongType, StructField, StructType

from grocery_affinity import config

log = logging.getLogger(__name__)

ORDER_ITEMS_SCHEMA = StructType([
    StructField("order_id", LongType(), True),
    StructField("product_id", LongType(), True),
])


def _require_columns(columns, required, source):
    missing = [c for c in required if c not in columns]
    if missing:
        raise ValueError(f"Missing columns in {source}: {missing}")


def load_order_items(spark, path):
    """Read the (order_id, product_id) pairs as a Spark DataFrame.

    Columns are read as text and cast to ORDER_ITEMS_SCHEMA by name, so the
    file is scanned once and extra columns in any position are ignored.
    """
    raw_df = spark.read \
        .option("header", "true") \
        .csv(str(path))

    _require_columns(raw_df.columns, config.ORDER_COLUMNS, path)

    order_items_df = raw_df.select(*[
        col(field.name).cast(field.dataType).alias(field.name)
        for field in ORDER_ITEMS_SCHEMA.fields
    ]).where(col("order_id").isNotNull() & col("product_id").isNotNull())

    log.info("Loaded order items from %s", path)
    return order_items_df


def load_catalog(path):
    """Read the product catalog into local memory."""
    catalog = pd.read_csv(path)
    _require_columns(catalog.columns, config.CATALOG_COLUMNS, path)

    catalog = catalog[list(config.CATALOG_COLUMNS)]
    log.info("Loaded %d catalog entries from %s", len(catalog), path)
    return catalog


def catalog_lookup(catalog):
    return dict(zip(catalog["product_id"], catalog["product_name"]))
