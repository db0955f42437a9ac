"""
Runs the scheduled news jobs: push notifications and the retention sweep.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import get_settings
from backend.dependencies import get_notification_dispatcher, get_retention_sweeper

logger = logging.getLogger(__name__)

JOBS = ("notifications", "retention")


def run_jobs(jobs: list[str]) -> dict[str, bool]:
    """Run each named job once. A failing job does not stop the others."""
    status: dict[str, bool] = {}
    for job in jobs:
        try:
            if job == "notifications":
                summary = get_notification_dispatcher().run()
                logger.info("Notifications: %s", summary.message)
            elif job == "retention":
                result = get_retention_sweeper().sweep()
                logger.info(
                    "Retention: deleted %d articles before %s",
                    result.deleted_count,
                    result.cutoff.isoformat(),
                )
            else:
                raise ValueError(f"Unknown job: {job}")
            status[job] = True
        except Exception as exc:
            logger.exception("Job %s failed: %s", job, exc)
            status[job] = False
    return status


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scheduled news jobs")
    parser.add_argument(
        "-j",
        "--job",
        action="append",
        choices=JOBS,
        help="Job to run (repeatable). Defaults to all jobs.",
    )
    parser.add_argument(
        "--interval-seconds",
        type=int,
        default=900,
        help="Seconds between runs",
    )
    parser.add_argument(
        "--jitter-seconds",
        type=int,
        default=60,
        help="Max random jitter added to sleep",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run the jobs a single time and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    get_settings().validate_startup()
    jobs = args.job or list(JOBS)

    while True:
        status = run_jobs(jobs)
        if args.once:
            return 0 if all(status.values()) else 1

        sleep_for = args.interval_seconds + random.uniform(0, args.jitter_seconds)
        logger.info("Sleeping for %.1fs", sleep_for)
        time.sleep(sleep_for)


if __name__ == "__main__":
    raise SystemExit(main())
