from __future__ import annotations

import os
from typing import Any, Dict, Literal, Mapping, Optional

import yaml  # type: ignore
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "STATEMENT_REPORT_"


class ReportSettings(BaseModel):
    """Settings for one report run.

    Defaults mirror the cluster the reports were first deployed on; every
    field can be overridden from YAML, the environment or the command line.
    """

    app_name: str = "Statement Report"
    engine: Literal["spark", "pandas"] = "spark"
    dataset_path: str = "hdfs://192.168.1.188:9000/datalake/"
    metastore_uri: Optional[str] = "thrift://localhost:9083"
    spark_master: str = "local[*]"
    warehouse_dir: str = "spark-warehouse"
    database: Optional[str] = None
    table_format: str = "hive"
    max_workers: int = Field(4, ge=1)
    top_n_users: int = Field(10, ge=1)
    default_name: str = "Vietcombank"
    manifest_dir: Optional[str] = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_dotenv(path: str = ".env") -> None:
    """Load environment variables from a .env file if present.

    Accepts `export KEY=value` lines and single or double quoted values.
    Does not override variables already set in the environment.
    """
    if not os.path.exists(path):
        return
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export "):]
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            val = val.strip()
            if len(val) >= 2 and val[0] == val[-1] and val[0] in "\"'":
                val = val[1:-1]
            os.environ.setdefault(key.strip(), val)


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for field in ReportSettings.model_fields:
        val = environ.get(ENV_PREFIX + field.upper())
        if val not in (None, ""):
            cfg[field] = val
    return cfg


def _from_yaml(yaml_path: str) -> Dict[str, Any]:
    if not os.path.exists(yaml_path):
        raise FileNotFoundError(f"Config file not found: {yaml_path}")
    with open(yaml_path, "r") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {yaml_path} must contain a mapping")
    section = loaded.get("report", loaded)
    return {k: v for k, v in section.items() if k in ReportSettings.model_fields}


def load_config(
    yaml_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ReportSettings:
    """Load settings from .env, environment, YAML and explicit overrides.

    Later sources win: environment < YAML < overrides. Overrides set to
    None are ignored so unset CLI flags fall through.
    """
    load_dotenv()
    cfg = _from_env(os.environ)
    if yaml_path:
        cfg.update(_from_yaml(yaml_path))
    if overrides:
        cfg.update({k: v for k, v in overrides.items() if v is not None})
    return ReportSettings(**cfg)
