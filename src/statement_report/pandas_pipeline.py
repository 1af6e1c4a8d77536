from __future__ import annotations

import glob
import logging
import os
import uuid
from typing import Callable, Dict, List

import pandas as pd

from statement_report.config import ReportSettings
from statement_report.logging_utils import timed
from statement_report.orchestrator import run_jobs
from statement_report.reports import add_partition_columns, report_transforms
from statement_report.schemas import PARTITION_COLUMNS, RunContext, RunSummary
from statement_report.validation import check_required_columns

logger = logging.getLogger(__name__)


def load_transactions(path: str) -> pd.DataFrame:
    """Read the transaction dataset and drop its own year/month/day partitions."""
    if "://" not in path and not os.path.exists(path):
        raise FileNotFoundError(f"Missing dataset at {path}")
    df = pd.read_parquet(path)
    df = df.drop(columns=[c for c in PARTITION_COLUMNS if c in df.columns])
    check_required_columns(df.columns, path)
    return df


def table_dir(table: str, settings: ReportSettings) -> str:
    parts = [settings.warehouse_dir]
    if settings.database:
        parts.append(f"{settings.database}.db")
    parts.append(table)
    return os.path.join(*parts)


def write_report(df: pd.DataFrame, table: str, settings: ReportSettings) -> List[str]:
    """Append ``df`` as new files under its year=/month=/day= partition folders.

    Existing files are never touched, so writing the same partition twice
    keeps both batches.
    """
    written: List[str] = []
    for keys, part in df.groupby(PARTITION_COLUMNS, sort=True):
        year, month, day = keys
        out_dir = os.path.join(
            table_dir(table, settings), f"year={year}", f"month={month}", f"day={day}"
        )
        os.makedirs(out_dir, exist_ok=True)
        out_path = os.path.join(out_dir, f"part-{uuid.uuid4().hex}.parquet")
        part.drop(columns=PARTITION_COLUMNS).to_parquet(out_path, index=False)
        written.append(out_path)
    return written


def read_table(table: str, settings: ReportSettings) -> pd.DataFrame:
    """Read every batch of a local report table, partition columns as strings."""
    pattern = os.path.join(table_dir(table, settings), "year=*", "month=*", "day=*", "*.parquet")
    dfs = []
    for path in sorted(glob.glob(pattern)):
        part_dirs = os.path.normpath(os.path.dirname(path)).split(os.sep)[-3:]
        values = dict(p.split("=", 1) for p in part_dirs)
        dfs.append(pd.read_parquet(path).assign(**values))
    if not dfs:
        return pd.DataFrame(columns=PARTITION_COLUMNS)
    return pd.concat(dfs, ignore_index=True)


def _make_job(
    name: str,
    transform: Callable[[pd.DataFrame], pd.DataFrame],
    df: pd.DataFrame,
    ctx: RunContext,
    settings: ReportSettings,
) -> Callable[[], int]:
    def job() -> int:
        result = add_partition_columns(transform(df), ctx)
        write_report(result, name, settings)
        return len(result)

    return job


def build_jobs(df: pd.DataFrame, ctx: RunContext, settings: ReportSettings) -> Dict[str, Callable[[], int]]:
    transforms = report_transforms(settings.default_name, settings.top_n_users)
    return {
        name: _make_job(name, transform, df, ctx, settings)
        for name, transform in transforms.items()
    }


def run_pipeline(settings: ReportSettings, ctx: RunContext) -> RunSummary:
    """Local single-process counterpart of the Spark pipeline."""
    with timed(logger, f"load {settings.dataset_path}"):
        df = load_transactions(settings.dataset_path)
    jobs = build_jobs(df, ctx, settings)
    return run_jobs(jobs, ctx.date_report, settings.max_workers)
