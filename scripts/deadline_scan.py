"""
One-shot deadline scan, for cron-style deployments without a live admin session.

Closes overdue projects and prints the resulting notifications.
Usage: python scripts/deadline_scan.py [--date YYYY-MM-DD]
"""

import argparse
import os
import sys
from datetime import date

# Add project root to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import get_settings  # noqa: E402
from app.database.database import new_session  # noqa: E402
from app.services.deadline import scan_deadlines  # noqa: E402
from app.utils.logger import setup_logging  # noqa: E402


def run_scan(today: date | None = None) -> int:
    settings = get_settings()
    logger = setup_logging(settings.LOG_LEVEL)
    logger.info("Starting deadline scan...")

    try:
        with new_session() as session:
            notifications = scan_deadlines(
                session, today, warning_days=settings.DEADLINE_WARNING_DAYS
            )
    except Exception as e:
        logger.error(f"Deadline scan failed: {e}")
        return 1

    for notification in notifications:
        logger.info(f"[{notification.level.value}] {notification.message}")
    closed = sum(1 for n in notifications if n.auto_closed)
    logger.info(
        f"Deadline scan completed: {len(notifications)} notifications, {closed} projects closed"
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--date", type=date.fromisoformat, default=None)
    args = parser.parse_args()
    sys.exit(run_scan(args.date))
