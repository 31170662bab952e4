"""Close attendance sessions left open past their cutoff.

Meant for cron, e.g. every 15 minutes:  */15 * * * * python scripts/auto_checkout.py
Running it more often than needed is harmless.
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

from src.geo_attendance.geo_attendance.container import build_container

logger = logging.getLogger("auto_checkout")


def main() -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        geofence=getattr(settings, "GEOFENCE", None),
        department_policies=getattr(settings, "DEPARTMENT_POLICIES", None),
    )
    summary = container.auto_checkout_service.run_once()
    logger.info(
        "closed=%d skipped=%d failed=%d", len(summary.closed), len(summary.skipped), len(summary.failed)
    )
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
