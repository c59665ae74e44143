import logging

from pyspark.ml.fpm import FPGrowth
from pyspark.sql.functions import col, collect_set, size

log = logging.getLogger(__name__)

RULE_COLUMNS = ["antecedent", "consequent", "confidence", "lift", "support"]


# ============================================================
# Aggregation
# ============================================================

def build_baskets(order_items_df):
    """One row per order with the distinct product ids bought in it."""
    return order_items_df.groupBy("order_id") \
        .agg(collect_set("product_id").alias("items"))


# ============================================================
# Rule mining
# ============================================================

def fit_fpgrowth(baskets_df, min_support, min_confidence, num_partitions=None):
    fp_growth = FPGrowth(
        itemsCol="items",
        minSupport=min_support,
        minConfidence=min_confidence,
    )
    if num_partitions:
        fp_growth.setNumPartitions(num_partitions)

    log.info("Fitting FP-growth (min_support=%s, min_confidence=%s)", min_support, min_confidence)
    model = fp_growth.fit(baskets_df)

    # rules and reports are all derived from the itemsets, mine them once
    model.freqItemsets.cache()
    return model


def association_rules(model):
    return model.associationRules.select(*RULE_COLUMNS)


def frequent_itemsets(model, min_size=1):
    return model.freqItemsets \
        .where(size(col("items")) >= min_size) \
        .orderBy(col("freq").desc())


def release(model, *frames):
    """Drop the cached itemsets and any derived frames before the session closes."""
    for df in frames:
        df.unpersist()
    model.freqItemsets.unpersist()


def collect_rules(rules_df):
    """Bring the mined rules into local memory, strongest first."""
    rules = rules_df.orderBy(col("confidence").desc()).toPandas()
    log.info("Collected %d association rules", len(rules))
    return rules


# ============================================================
# Reporting / output
# ============================================================

def show_report(baskets_df, rules_df, itemsets_df, top_n=20):
    print("=== Baskets Schema ===")
    baskets_df.printSchema()

    print("=== Baskets Sample ===")
    baskets_df.show(5, truncate=False)

    print("=== Top Frequent Itemsets ===")
    itemsets_df.show(top_n, truncate=False)

    print("=== Top Association Rules ===")
    rules_df.orderBy(col("confidence").desc()).show(top_n, truncate=False)


def save_json(df, out_dir):
    df \
        .coalesce(1) \
        .write.mode("overwrite") \
        .json(str(out_dir))
    log.info("Saved %s", out_dir)
