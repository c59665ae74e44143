import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest
from pyspark.sql import SparkSession


@pytest.fixture(scope="session")
def spark():
    session = SparkSession.builder \
        .appName("grocery-affinity-tests") \
        .master("local[1]") \
        .config("spark.sql.shuffle.partitions", "1") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()
    yield session
    session.stop()


@pytest.fixture
def catalog():
    return pd.DataFrame({
        "product_id": [1, 2, 3, 4],
        "product_name": ["Milk", "Bread", "Eggs", "Butter"],
    })


@pytest.fixture
def rules():
    return pd.DataFrame({
        "antecedent": [[1], [2], [3], [1, 2]],
        "consequent": [[2], [1], [99], [3]],
        "confidence": [1.0, 0.8, 0.5, 0.4],
        "lift": [1.5, 1.5, 2.0, 1.1],
        "support": [0.5, 0.5, 0.2, 0.1],
    })
