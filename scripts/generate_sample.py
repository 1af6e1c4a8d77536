#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
from datetime import datetime

from statement_report.generator import generate_transactions, write_partitioned_dataset


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic statement transactions")
    parser.add_argument("--n_transactions", type=int, default=10000)
    parser.add_argument("--start", type=str, default="2024-09-01")
    parser.add_argument("--days", type=int, default=30)
    parser.add_argument("--out_dir", type=str, default="data/datalake")
    parser.add_argument("--seed", type=int, default=12345)
    args = parser.parse_args()

    print("Generating synthetic transactions ...")
    df = generate_transactions(
        num_transactions=args.n_transactions,
        start=args.start,
        days=args.days,
        seed=args.seed,
    )

    ts = datetime.now().strftime("sample_%Y%m%d_%H%M%S")
    out_path = os.path.join(args.out_dir, ts)
    print(f"Writing outputs to {out_path} ...")
    write_partitioned_dataset(df, out_path)

    # Small CSV head for quick inspection
    df.head(1000).to_csv(os.path.join(args.out_dir, f"{ts}_head.csv"), index=False)

    print("Done.")


if __name__ == "__main__":
    main()
