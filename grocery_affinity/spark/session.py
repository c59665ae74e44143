import logging
from contextlib import contextmanager

from pyspark.sql import SparkSession

from grocery_affinity import config

log = logging.getLogger(__name__)


def build_session(app_name=config.APP_NAME, master=config.SPARK_MASTER):
    return SparkSession.builder \
        .appName(app_name) \
        .master(master) \
        .getOrCreate()


@contextmanager
def spark_session(app_name=config.APP_NAME, master=config.SPARK_MASTER):
    """Yield a Spark session and stop it once the block exits."""
    spark = build_session(app_name, master)
    log.info("Spark %s session started (master=%s)", spark.version, master)
    try:
        yield spark
    finally:
        spark.stop()
        log.info("Spark session stopped")
