from __future__ import annotations

import json
import os
import subprocess
from datetime import datetime, timezone

from statement_report.config import ReportSettings
from statement_report.schemas import RunSummary


def get_git_commit() -> str | None:
    try:
        sha = (
            subprocess.check_output(
                ["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL
            )
            .decode()
            .strip()
        )
        return sha
    except (OSError, subprocess.CalledProcessError):
        return None


def write_run_manifest(output_dir: str, settings: ReportSettings, summary: RunSummary) -> str:
    """Write the per-report outcome of a run as JSON next to earlier runs."""
    os.makedirs(output_dir, exist_ok=True)
    now = datetime.now(timezone.utc)
    manifest = {
        "timestamp": now.isoformat().replace("+00:00", "Z"),
        "git_commit": get_git_commit(),
        "date_report": summary.date_report,
        "ok": summary.ok,
        "settings": settings.model_dump(),
        "results": [r.model_dump() for r in summary.results],
    }
    out_path = os.path.join(
        output_dir, f"run_{summary.date_report}_{now.strftime('%Y%m%dT%H%M%S%f')}.json"
    )
    with open(out_path, "w") as f:
        json.dump(manifest, f, indent=2, sort_keys=True)
    return out_path
