from __future__ import annotations

from typing import Any, Callable, Dict

from statement_report.reports import (
    TOTAL_AMOUNT_BY_BANK,
    TOTAL_AMOUNT_BY_DAY,
    TRANSACTION_COUNT_BY_CODE,
    USER_TRANSACTION_REPORT,
)
from statement_report.schemas import RunContext

Fspark: Any = None
try:
    from pyspark.sql import functions as _F  # noqa: F401

    Fspark = _F
except Exception:  # pragma: no cover
    pass

SPARK_DATE_FORMAT = "dd/MM/yyyy"


def total_amount_by_day(df: Any) -> Any:
    """Sum credit per day-of-month; columns: transaction_day, total_amount."""
    updated = df.withColumn(
        "transaction_date", Fspark.to_date(Fspark.col("transaction_date"), SPARK_DATE_FORMAT)
    ).withColumn("transaction_day", Fspark.dayofmonth("transaction_date").cast("long"))
    return updated.groupBy("transaction_day").agg(
        Fspark.sum("credit").alias("total_amount")
    )


def total_amount_by_bank(df: Any) -> Any:
    return df.groupBy("bank").agg(Fspark.sum("credit").alias("total_amount"))


def transaction_count_by_code(df: Any) -> Any:
    return df.groupBy("no_or_code").agg(
        Fspark.count("no_or_code").alias("transaction_count")
    )


def user_transaction_report(df: Any, default_name: str = "Vietcombank", top_n: int = 10) -> Any:
    """Top users by total credit, blank names bucketed under ``default_name``.

    Ordered by total_credit descending then name ascending so truncation is
    deterministic when totals tie.
    """
    name = Fspark.col("name")
    updated = df.withColumn(
        "name",
        Fspark.when(name.isNull() | (Fspark.trim(name) == ""), Fspark.lit(default_name))
        .otherwise(name),
    )
    report = updated.groupBy("name").agg(
        Fspark.count("no_or_code").alias("transaction_count"),
        Fspark.avg("credit").alias("average_credit"),
        Fspark.sum("credit").alias("total_credit"),
    )
    return report.orderBy(
        Fspark.col("total_credit").desc(), Fspark.col("name").asc()
    ).limit(top_n)


def add_partition_columns(df: Any, ctx: RunContext) -> Any:
    out = df
    for col_name, value in ctx.partition_values().items():
        out = out.withColumn(col_name, Fspark.lit(value))
    return out


def report_transforms(
    default_name: str = "Vietcombank", top_n: int = 10
) -> Dict[str, Callable[[Any], Any]]:
    return {
        TOTAL_AMOUNT_BY_DAY: total_amount_by_day,
        TOTAL_AMOUNT_BY_BANK: total_amount_by_bank,
        TRANSACTION_COUNT_BY_CODE: transaction_count_by_code,
        USER_TRANSACTION_REPORT: lambda df: user_transaction_report(
            df, default_name=default_name, top_n=top_n
        ),
    }
