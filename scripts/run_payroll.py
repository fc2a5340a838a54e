"""Run payroll for one period from the command line (no Flask).

Usage: python scripts/run_payroll.py March 2025
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_payroll.hr_payroll.container import build_container


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print("usage: run_payroll.py <month> <year>")
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=settings.DB_CONFIG,
        payroll_max_workers=int(getattr(settings, "PAYROLL_MAX_WORKERS", 4)),
        open_record_policy=str(getattr(settings, "PAYROLL_OPEN_RECORD_POLICY", "zero")),
    )
    result = container.payroll_service.run_payroll(argv[0], argv[1])

    print(f"{result.month} {result.year}: processed={result.processed} failed={result.failed} skipped={result.skipped}")
    for employee_id, message in result.errors.items():
        print(f"  employee {employee_id}: {message}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
