from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Mapping, Optional

from statement_report.logging_utils import timed
from statement_report.schemas import JobResult, RunSummary

logger = logging.getLogger(__name__)

Job = Callable[[], Optional[int]]


def _run_one(name: str, job: Job) -> JobResult:
    start = time.time()
    try:
        with timed(logger, name):
            rows = job()
    except Exception as exc:
        logger.exception(f"Report {name} failed")
        return JobResult(
            name=name,
            status="failed",
            error_type=type(exc).__name__,
            error=str(exc),
            elapsed_seconds=time.time() - start,
        )
    return JobResult(
        name=name,
        status="succeeded",
        rows_written=rows,
        elapsed_seconds=time.time() - start,
    )


def run_jobs(
    jobs: Mapping[str, Job],
    date_report: str,
    max_workers: Optional[int] = None,
) -> RunSummary:
    """Run independent report jobs concurrently and wait for all of them.

    A job that raises is recorded as failed; the other jobs still run to
    completion. Each job returns the number of rows it wrote.
    """
    workers = max_workers or max(len(jobs), 1)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="report") as pool:
        futures = {name: pool.submit(_run_one, name, job) for name, job in jobs.items()}
        results = [futures[name].result() for name in jobs]

    summary = RunSummary(date_report=date_report, results=results)
    for r in summary.results:
        if r.status == "succeeded":
            logger.info(f"{r.name}: wrote {r.rows_written} rows in {r.elapsed_seconds:.2f}s")
        else:
            logger.error(f"{r.name}: {r.error_type}: {r.error}")
    logger.info(
        f"Run {date_report}: {len(summary.succeeded)} succeeded, {len(summary.failed)} failed"
    )
    return summary
