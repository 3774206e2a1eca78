"""Run payroll for every worker with assignments in a period.

Usage: python scripts/run_pay_cycle.py 2024-01-01 2024-01-28 [--worker 3 --worker 7]

Meant to be called by a scheduler (cron); choosing the period is the caller's job.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.staffing_office.staffing_office.container import build_container
from src.staffing_office.staffing_office.logging_config import setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("start_date", help="YYYY-MM-DD")
    parser.add_argument("end_date", help="YYYY-MM-DD")
    parser.add_argument("--worker", type=int, action="append", dest="worker_ids", help="limit to these worker ids")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", None))
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        status_update_workers=int(getattr(settings, "STATUS_UPDATE_WORKERS", 4)),
    )

    report = container.payroll_service.run_pay_cycle(args.start_date, args.end_date, worker_ids=args.worker_ids)
    if not report.success:
        parser.error(report.error)
    print(
        f"Pay cycle {report.start_date} .. {report.end_date}: "
        f"created={len(report.created)} skipped={len(report.skipped)} failed={len(report.failed)}"
    )
    for r in report.failed:
        print(f"  worker {r.worker_id}: {r.error}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
