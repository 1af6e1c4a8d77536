from __future__ import annotations

import os
from typing import Dict, Iterable, List

import pandas as pd

from statement_report.reports import TRANSACTION_DATE_FORMAT
from statement_report.schemas import PARTITION_COLUMNS, REQUIRED_COLUMNS


class MissingColumnsError(ValueError):
    pass


def _check_columns(columns: Iterable[str], required: List[str]) -> List[str]:
    present = set(columns)
    missing = [c for c in required if c not in present]
    return missing


def check_required_columns(columns: Iterable[str], source: str) -> None:
    missing = _check_columns(columns, REQUIRED_COLUMNS)
    if missing:
        raise MissingColumnsError(f"Dataset {source} missing required columns: {missing}")


def validate_transactions(df: pd.DataFrame, scope: str = "transactions") -> List[Dict[str, str]]:
    issues: List[Dict[str, str]] = []
    missing = _check_columns(df.columns, REQUIRED_COLUMNS)
    if missing:
        issues.append({"level": "ERROR", "scope": scope, "message": f"Missing columns: {missing}"})
        return issues
    if df.empty:
        issues.append({"level": "WARN", "scope": scope, "message": "Dataset has no rows"})
        return issues
    credit = pd.to_numeric(df["credit"], errors="coerce")
    if (credit < 0).any():
        issues.append({"level": "WARN", "scope": scope, "message": "Negative credit found"})
    null_ratio = credit.isna().mean()
    if null_ratio > 0.01:
        issues.append({"level": "WARN", "scope": scope, "message": f"credit null ratio {null_ratio:.2%} > 1%"})
    parsed = pd.to_datetime(df["transaction_date"], format=TRANSACTION_DATE_FORMAT, errors="coerce")
    bad_dates = int(parsed.isna().sum())
    if bad_dates:
        issues.append({"level": "WARN", "scope": scope, "message": f"{bad_dates} transaction_date values are not dd/MM/yyyy"})
    # Blank names are reported under the default bucket, not dropped
    blank = df["name"].isna() | df["name"].astype("string").str.strip().eq("").fillna(False)
    n_blank = int(blank.sum())
    if n_blank:
        issues.append({"level": "INFO", "scope": scope, "message": f"{n_blank} rows with blank name"})
    return issues


def validate_dataset(dataset_path: str) -> pd.DataFrame:
    if not os.path.exists(dataset_path):
        raise FileNotFoundError(f"Missing dataset at {dataset_path}")
    df = pd.read_parquet(dataset_path)
    df = df.drop(columns=[c for c in PARTITION_COLUMNS if c in df.columns])
    issues = validate_transactions(df, scope=os.path.basename(os.path.normpath(dataset_path)))
    report = pd.DataFrame(issues, columns=["level", "scope", "message"]) if issues else pd.DataFrame(columns=["level", "scope", "message"])
    return report
