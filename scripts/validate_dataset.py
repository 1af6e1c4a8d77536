#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os

from statement_report.validation import validate_dataset


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate transaction dataset quality and schema")
    parser.add_argument("--input", type=str, required=True, help="Transaction parquet dataset path")
    parser.add_argument("--out", type=str, default=None, help="Output folder; defaults to a validation folder beside the dataset")
    args = parser.parse_args()

    report = validate_dataset(args.input)
    out_dir = args.out or os.path.join(os.path.dirname(os.path.normpath(args.input)), "validation")
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, "validation_report.csv")
    report.to_csv(out_path, index=False)
    print(f"Wrote {out_path} with {len(report)} issues")


if __name__ == "__main__":
    main()
