from __future__ import annotations

import pytest

from statement_report.config import ReportSettings
from statement_report.generator import generate_transactions, write_partitioned_dataset
from statement_report.reports import REPORT_NAMES
from statement_report.spark_pipeline import load_transactions, run_pipeline, write_report
from statement_report.spark_reports import (
    add_partition_columns,
    total_amount_by_bank,
    total_amount_by_day,
    transaction_count_by_code,
    user_transaction_report,
)

SCHEMA = "transaction_date string, bank string, no_or_code string, credit double, name string"


@pytest.fixture()
def spark_transactions(spark, transactions):
    rows = [tuple(r) for r in transactions.astype(object).where(transactions.notna(), None).values.tolist()]
    return spark.createDataFrame(rows, SCHEMA)


def test_total_amount_by_bank_example(spark):
    df = spark.createDataFrame(
        [("01/09/2024", "A", "TX1", 100.0, "x"), ("01/09/2024", "B", "TX2", 50.0, "y"), ("01/09/2024", "A", "TX3", 25.0, "z")],
        SCHEMA,
    )
    out = {r["bank"]: r["total_amount"] for r in total_amount_by_bank(df).collect()}
    assert out == {"A": 125.0, "B": 50.0}


def test_total_amount_by_day(spark_transactions):
    out = {r["transaction_day"]: r["total_amount"] for r in total_amount_by_day(spark_transactions).collect()}
    assert out == {1: 150.0, 2: 25.0, 15: 50.0, 30: 5.0}


def test_transaction_count_by_code(spark_transactions):
    out = {r["no_or_code"]: r["transaction_count"] for r in transaction_count_by_code(spark_transactions).collect()}
    assert out == {"TX1": 2, "TX2": 2, "TX3": 1, "TX4": 1}


def test_user_report_matches_pandas_semantics(spark_transactions):
    rows = user_transaction_report(spark_transactions).collect()
    by_name = {r["name"]: r for r in rows}
    assert set(by_name) == {"Linh", "Minh", "Vietcombank"}
    assert by_name["Vietcombank"]["transaction_count"] == 3
    assert by_name["Vietcombank"]["total_credit"] == pytest.approx(75.0)
    totals = [r["total_credit"] for r in rows]
    assert totals == sorted(totals, reverse=True)


def test_user_report_top_n_tie_break(spark):
    data = [("01/09/2024", "A", "TX", float(i), f"user{i:02d}") for i in range(15)]
    data += [("01/09/2024", "A", "TX", 100.0, "zed"), ("01/09/2024", "A", "TX", 100.0, "abe")]
    rows = user_transaction_report(spark.createDataFrame(data, SCHEMA)).collect()
    assert len(rows) == 10
    assert [r["name"] for r in rows[:2]] == ["abe", "zed"]


def test_partition_columns_are_uniform(spark_transactions, run_ctx):
    out = add_partition_columns(total_amount_by_bank(spark_transactions), run_ctx)
    quads = {(r["year"], r["month"], r["day"], r["date_report"]) for r in out.collect()}
    assert quads == {("2024", "10", "05", "2024-10-05")}


def test_append_writes_duplicate_batches(spark, spark_transactions, run_ctx):
    spark.sql("CREATE DATABASE IF NOT EXISTS append_check")
    settings = ReportSettings(table_format="parquet", metastore_uri=None, database="append_check")
    result = add_partition_columns(total_amount_by_bank(spark_transactions), run_ctx)
    write_report(result, "total_amount_by_bank", settings)
    write_report(result, "total_amount_by_bank", settings)
    assert spark.table("append_check.total_amount_by_bank").count() == 2 * result.count()


def test_run_pipeline_with_existing_session(spark, tmp_path, run_ctx):
    dataset = tmp_path / "datalake"
    write_partitioned_dataset(generate_transactions(300, seed=11), str(dataset))
    spark.sql("CREATE DATABASE IF NOT EXISTS pipeline_check")
    settings = ReportSettings(
        dataset_path=str(dataset),
        metastore_uri=None,
        table_format="parquet",
        database="pipeline_check",
    )
    source = load_transactions(spark, str(dataset))
    assert not {"year", "month", "day"} & set(source.columns)

    summary = run_pipeline(settings, run_ctx, spark=spark)
    assert summary.ok, summary.results
    total_credit = source.agg({"credit": "sum"}).collect()[0][0]
    for table in REPORT_NAMES:
        rows = spark.table(f"pipeline_check.{table}").collect()
        assert {(r["year"], r["month"], r["day"], r["date_report"]) for r in rows} == {
            ("2024", "10", "05", "2024-10-05")
        }
    by_day = spark.table("pipeline_check.total_amount_by_day").agg({"total_amount": "sum"}).collect()[0][0]
    assert by_day == pytest.approx(total_credit)
    assert spark.table("pipeline_check.user_transaction_report").count() <= 10
