from __future__ import annotations

import os

import numpy as np
import pandas as pd


BANKS = [
    "Vietcombank",
    "BIDV",
    "VietinBank",
    "Agribank",
    "Techcombank",
    "MB Bank",
    "ACB",
    "VPBank",
    "Sacombank",
    "TPBank",
]
FIRST_NAMES = ["Nguyen", "Tran", "Le", "Pham", "Hoang", "Phan", "Vu", "Dang", "Bui", "Do"]
LAST_NAMES = ["An", "Binh", "Chi", "Dung", "Giang", "Hanh", "Khanh", "Linh", "Minh", "Trang"]


def _rng(seed: int | None) -> np.random.Generator:
    if seed is None:
        seed = 12345
    return np.random.default_rng(seed)


def generate_transactions(
    num_transactions: int,
    start: str = "2024-09-01",
    days: int = 30,
    blank_name_share: float = 0.1,
    seed: int | None = 12345,
) -> pd.DataFrame:
    """Synthetic statement transactions with the datalake's columns.

    A ``blank_name_share`` fraction of rows gets a null or empty name, the
    way statement lines without a counterparty arrive from the bank.
    """
    rs = _rng(seed)
    dates = pd.Timestamp(start) + pd.to_timedelta(
        rs.integers(0, days, size=num_transactions), unit="D"
    )
    pool = np.array([f"{f} {l}" for f in FIRST_NAMES for l in LAST_NAMES])
    names = rs.choice(pool, size=num_transactions).astype(object)
    blank = rs.random(num_transactions) < blank_name_share
    names[blank] = rs.choice(np.array([None, "", "  "], dtype=object), size=int(blank.sum()))
    credit = np.round(rs.lognormal(mean=13.0, sigma=1.0, size=num_transactions), -3)

    return pd.DataFrame(
        {
            "transaction_date": dates.strftime("%d/%m/%Y"),
            "bank": rs.choice(BANKS, size=num_transactions),
            "no_or_code": np.char.add("TX", rs.integers(1000, 1200, size=num_transactions).astype(str)),
            "credit": credit,
            "name": pd.Series(names, dtype=object),
            "year": dates.strftime("%Y"),
            "month": dates.strftime("%m"),
            "day": dates.strftime("%d"),
        }
    )


def write_partitioned_dataset(df: pd.DataFrame, out_dir: str) -> str:
    """Write transactions as parquet partitioned by their own year/month/day."""
    os.makedirs(out_dir, exist_ok=True)
    df.to_parquet(out_dir, partition_cols=["year", "month", "day"], index=False)
    return out_dir
