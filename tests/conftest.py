from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from statement_report.config import ReportSettings
from statement_report.generator import generate_transactions, write_partitioned_dataset
from statement_report.run_context import resolve_execution_date
from statement_report.schemas import RunContext


@pytest.fixture()
def transactions() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"transaction_date": "01/09/2024", "bank": "A", "no_or_code": "TX1", "credit": 100.0, "name": "Linh"},
            {"transaction_date": "01/09/2024", "bank": "B", "no_or_code": "TX2", "credit": 50.0, "name": "Minh"},
            {"transaction_date": "02/09/2024", "bank": "A", "no_or_code": "TX1", "credit": 25.0, "name": None},
            {"transaction_date": "15/09/2024", "bank": "C", "no_or_code": "TX3", "credit": 10.0, "name": ""},
            {"transaction_date": "15/09/2024", "bank": "B", "no_or_code": "TX2", "credit": 40.0, "name": "   "},
            {"transaction_date": "30/09/2024", "bank": "A", "no_or_code": "TX4", "credit": 5.0, "name": "Linh"},
        ]
    )


@pytest.fixture()
def run_ctx() -> RunContext:
    return resolve_execution_date("2024-10-05")


@pytest.fixture()
def dataset_dir(tmp_path: Path) -> Path:
    out = tmp_path / "datalake"
    write_partitioned_dataset(generate_transactions(500, seed=7), str(out))
    return out


@pytest.fixture()
def local_settings(tmp_path: Path, dataset_dir: Path) -> ReportSettings:
    return ReportSettings(
        engine="pandas",
        dataset_path=str(dataset_dir),
        metastore_uri=None,
        warehouse_dir=str(tmp_path / "warehouse"),
        manifest_dir=str(tmp_path / "manifests"),
    )


@pytest.fixture(scope="session")
def spark(tmp_path_factory: pytest.TempPathFactory) -> Generator[Any, None, None]:
    pytest.importorskip("pyspark")
    from pyspark.sql import SparkSession

    warehouse = tmp_path_factory.mktemp("spark-warehouse")
    try:
        session = (
            SparkSession.builder.master("local[2]")
            .appName("statement_report_tests")
            .config("spark.sql.shuffle.partitions", "2")
            .config("spark.ui.enabled", "false")
            .config("spark.sql.warehouse.dir", str(warehouse))
            .getOrCreate()
        )
    except Exception as exc:  # no JVM on the test host
        pytest.skip(f"Spark unavailable: {exc}")
    yield session
    session.stop()
