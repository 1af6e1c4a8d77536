from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from statement_report.config import ReportSettings
from statement_report.logging_utils import timed
from statement_report.orchestrator import run_jobs
from statement_report.schemas import PARTITION_COLUMNS, RunContext, RunSummary
from statement_report.spark_reports import add_partition_columns, report_transforms
from statement_report.validation import check_required_columns

SparkSession: Any = None
try:
    from pyspark.sql import SparkSession as _SparkSession  # noqa: F401

    SparkSession = _SparkSession
except Exception:  # pragma: no cover
    pass

logger = logging.getLogger(__name__)


def build_spark_session(settings: ReportSettings) -> Any:
    if SparkSession is None:
        raise RuntimeError(
            "PySpark not installed. Install pyspark or run with engine 'pandas'."
        )
    builder = (
        SparkSession.builder.appName(settings.app_name)
        .master(settings.spark_master)
        .config("spark.sql.warehouse.dir", settings.warehouse_dir)
    )
    if settings.metastore_uri or settings.table_format == "hive":
        builder = (
            builder.config("spark.sql.catalogImplementation", "hive")
            .config("hive.exec.dynamic.partition", "true")
            .config("hive.exec.dynamic.partition.mode", "nonstrict")
        )
        if settings.metastore_uri:
            builder = builder.config("hive.metastore.uris", settings.metastore_uri)
        builder = builder.enableHiveSupport()
    return builder.getOrCreate()


def load_transactions(spark: Any, path: str) -> Any:
    """Read the transaction datalake and drop its own year/month/day partitions."""
    df = spark.read.parquet(path).drop(*PARTITION_COLUMNS)
    check_required_columns(df.columns, path)
    return df


def table_name(table: str, settings: ReportSettings) -> str:
    return f"{settings.database}.{table}" if settings.database else table


def write_report(df: Any, table: str, settings: ReportSettings) -> None:
    (
        df.write.format(settings.table_format)
        .partitionBy(*PARTITION_COLUMNS)
        .mode("append")
        .saveAsTable(table_name(table, settings))
    )


def _make_job(
    name: str,
    transform: Callable[[Any], Any],
    df: Any,
    ctx: RunContext,
    settings: ReportSettings,
) -> Callable[[], int]:
    def job() -> int:
        result = add_partition_columns(transform(df), ctx).cache()
        try:
            rows = result.count()
            write_report(result, name, settings)
        finally:
            result.unpersist()
        return rows

    return job


def build_jobs(df: Any, ctx: RunContext, settings: ReportSettings) -> Dict[str, Callable[[], int]]:
    transforms = report_transforms(settings.default_name, settings.top_n_users)
    return {
        name: _make_job(name, transform, df, ctx, settings)
        for name, transform in transforms.items()
    }


def run_pipeline(
    settings: ReportSettings, ctx: RunContext, spark: Optional[Any] = None
) -> RunSummary:
    """Load the datalake once and append all four reports for ``ctx``.

    A session passed in by the caller is left running; a session created
    here is stopped when the run ends.
    """
    owns_session = spark is None
    if owns_session:
        spark = build_spark_session(settings)
    try:
        with timed(logger, f"load {settings.dataset_path}"):
            df = load_transactions(spark, settings.dataset_path)
        jobs = build_jobs(df, ctx, settings)
        return run_jobs(jobs, ctx.date_report, settings.max_workers)
    finally:
        if owns_session:
            spark.stop()
