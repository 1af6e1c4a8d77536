from __future__ import annotations

from typing import Callable, Dict, List

import pandas as pd

from statement_report.schemas import RunContext

TOTAL_AMOUNT_BY_DAY = "total_amount_by_day"
TOTAL_AMOUNT_BY_BANK = "total_amount_by_bank"
TRANSACTION_COUNT_BY_CODE = "transaction_count_by_code"
USER_TRANSACTION_REPORT = "user_transaction_report"

REPORT_NAMES: List[str] = [
    TOTAL_AMOUNT_BY_DAY,
    TOTAL_AMOUNT_BY_BANK,
    TRANSACTION_COUNT_BY_CODE,
    USER_TRANSACTION_REPORT,
]

TRANSACTION_DATE_FORMAT = "%d/%m/%Y"


def _require(df: pd.DataFrame, required: set, label: str) -> None:
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"{label}: transactions missing required columns: {missing}")


def normalize_names(names: pd.Series, default_name: str = "Vietcombank") -> pd.Series:
    """Replace null or blank names with the default bucket name."""
    blank = names.isna() | names.astype("string").str.strip().eq("").fillna(False)
    return names.mask(blank.astype(bool), default_name)


def total_amount_by_day(df: pd.DataFrame) -> pd.DataFrame:
    """Sum credit per day-of-month of the transaction date.

    Rows whose transaction_date does not parse as dd/MM/yyyy land in a
    null transaction_day group.

    Returns:
    - DataFrame with columns: transaction_day, total_amount
    """
    _require(df, {"transaction_date", "credit"}, TOTAL_AMOUNT_BY_DAY)
    parsed = pd.to_datetime(
        df["transaction_date"], format=TRANSACTION_DATE_FORMAT, errors="coerce"
    )
    days = parsed.dt.day.astype("Int64").rename("transaction_day")
    agg = (
        df["credit"].groupby(days, dropna=False).sum(min_count=1)
        .rename("total_amount")
        .reset_index()
    )
    return agg.sort_values("transaction_day", na_position="last").reset_index(drop=True)


def total_amount_by_bank(df: pd.DataFrame) -> pd.DataFrame:
    """Sum credit per bank.

    Returns:
    - DataFrame with columns: bank, total_amount
    """
    _require(df, {"bank", "credit"}, TOTAL_AMOUNT_BY_BANK)
    agg = (
        df.groupby("bank", as_index=False, dropna=False)["credit"].sum(min_count=1)
        .rename(columns={"credit": "total_amount"})
    )
    return agg.sort_values("bank", na_position="last").reset_index(drop=True)


def transaction_count_by_code(df: pd.DataFrame) -> pd.DataFrame:
    """Count transactions per no_or_code; null codes count as zero."""
    _require(df, {"no_or_code"}, TRANSACTION_COUNT_BY_CODE)
    codes = df["no_or_code"]
    agg = (
        codes.notna().groupby(codes, dropna=False).sum()
        .astype("int64")
        .rename("transaction_count")
        .reset_index()
    )
    return agg.sort_values("no_or_code", na_position="last").reset_index(drop=True)


def user_transaction_report(
    df: pd.DataFrame, default_name: str = "Vietcombank", top_n: int = 10
) -> pd.DataFrame:
    """Top users by total credit.

    Null or blank names are attributed to ``default_name``. Rows are ordered
    by total_credit descending, ties by name ascending, and truncated to
    ``top_n``.

    Returns:
    - DataFrame with columns: name, transaction_count, average_credit, total_credit
    """
    _require(df, {"name", "no_or_code", "credit"}, USER_TRANSACTION_REPORT)
    out = df.assign(name=normalize_names(df["name"], default_name))
    agg = out.groupby("name", as_index=False).agg(
        transaction_count=("no_or_code", "count"),
        average_credit=("credit", "mean"),
        total_credit=("credit", "sum"),
    )
    agg = agg.sort_values(
        ["total_credit", "name"], ascending=[False, True], kind="mergesort"
    )
    return agg.head(top_n).reset_index(drop=True)


def add_partition_columns(df: pd.DataFrame, ctx: RunContext) -> pd.DataFrame:
    """Stamp year, month, day and date_report from the run context on every row."""
    return df.assign(**ctx.partition_values())


def report_transforms(
    default_name: str = "Vietcombank", top_n: int = 10
) -> Dict[str, Callable[[pd.DataFrame], pd.DataFrame]]:
    return {
        TOTAL_AMOUNT_BY_DAY: total_amount_by_day,
        TOTAL_AMOUNT_BY_BANK: total_amount_by_bank,
        TRANSACTION_COUNT_BY_CODE: transaction_count_by_code,
        USER_TRANSACTION_REPORT: lambda df: user_transaction_report(
            df, default_name=default_name, top_n=top_n
        ),
    }
