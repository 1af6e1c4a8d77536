#!/usr/bin/env python3
from __future__ import annotations

import sys

from statement_report.cli import main


if __name__ == "__main__":
    sys.exit(main())
