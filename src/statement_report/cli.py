from __future__ import annotations

import argparse
from typing import List, Optional

from statement_report.config import load_config
from statement_report.logging_utils import get_logger
from statement_report.manifest import write_run_manifest
from statement_report.run_context import InvalidExecutionDateError, resolve_execution_date
from statement_report.schemas import RunSummary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Append the daily statement reports for one execution date"
    )
    parser.add_argument(
        "-executionDate",
        "--execution-date",
        dest="execution_date",
        type=str,
        default=None,
        help="Business date of the run as YYYY-MM-DD; defaults to today",
    )
    parser.add_argument("--config", type=str, default=None, help="YAML settings file")
    parser.add_argument("--engine", choices=["spark", "pandas"], default=None)
    parser.add_argument("--dataset-path", dest="dataset_path", type=str, default=None)
    parser.add_argument("--metastore-uri", dest="metastore_uri", type=str, default=None)
    parser.add_argument("--warehouse-dir", dest="warehouse_dir", type=str, default=None)
    parser.add_argument(
        "--manifest-dir",
        dest="manifest_dir",
        type=str,
        default=None,
        help="Folder for the JSON run manifest; no manifest when unset",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        ctx = resolve_execution_date(args.execution_date)
    except InvalidExecutionDateError as exc:
        parser.error(str(exc))

    settings = load_config(
        args.config,
        overrides={
            "engine": args.engine,
            "dataset_path": args.dataset_path,
            "metastore_uri": args.metastore_uri,
            "warehouse_dir": args.warehouse_dir,
            "manifest_dir": args.manifest_dir,
            "log_level": args.log_level,
        },
    )
    logger = get_logger(level=settings.log_level)
    logger.info(f"Statement reports for {ctx.date_report} using {settings.engine} engine")

    summary: RunSummary
    if settings.engine == "pandas":
        from statement_report.pandas_pipeline import run_pipeline as run_local

        summary = run_local(settings, ctx)
    else:
        from statement_report.spark_pipeline import run_pipeline as run_spark

        summary = run_spark(settings, ctx)

    if settings.manifest_dir:
        path = write_run_manifest(settings.manifest_dir, settings, summary)
        logger.info(f"Wrote run manifest to {path}")
    return 0 if summary.ok else 1
