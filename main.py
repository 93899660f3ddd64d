"""
Storefront E2E
==============
Uruchamia flow sklepu rownolegle, kazdy w osobnej sesji przegladarki.

Uzycie:
    python main.py                                  # wszystkie flow
    python main.py --flow order_single_product      # tylko wskazany flow (mozna kilka razy)
    python main.py --workers 4                      # nadpisz liczbe workers
    python main.py --headless / --headed            # bez okna / z oknem przegladarki
    python main.py --locale RO                      # dane klienta dla Rumunii
    python main.py --base-url https://shop.local    # inny sklep
"""

import asyncio
import dataclasses
import logging
import sys
from datetime import datetime
from pathlib import Path

from config import get_settings
from database import SessionLocal, init_db
from scenarios.flows import FLOWS
from scenarios.suite_executor import SuiteExecutor
from scenarios.test_data import normalize_locale

logger = logging.getLogger(__name__)


def setup_logging():
    Path("logs").mkdir(exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(
                f"logs/run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log",
                encoding="utf-8"
            )
        ]
    )


def _value_after(flag: str) -> str | None:
    if flag not in sys.argv:
        return None
    idx = sys.argv.index(flag)
    if idx + 1 >= len(sys.argv):
        logger.error(f"Brak wartosci dla {flag}")
        sys.exit(2)
    return sys.argv[idx + 1]


def parse_args():
    flows = [sys.argv[i + 1] for i, arg in enumerate(sys.argv[:-1]) if arg == "--flow"]
    workers = _value_after("--workers")
    headless = None
    if "--headless" in sys.argv:
        headless = True
    if "--headed" in sys.argv:
        headless = False

    return flows, int(workers) if workers else None, headless, _value_after("--locale"), _value_after("--base-url")


async def run_suite(flow_names: list[str], settings, workers: int | None, headless: bool | None):
    db = SessionLocal()
    try:
        executor = SuiteExecutor(
            flow_names=flow_names,
            settings=settings,
            db=db,
            workers=workers,
            headless=headless,
        )
        suite_run = await executor.run()
        return suite_run.status.value
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    flow_names, workers, headless, locale, base_url = parse_args()

    unknown = [name for name in flow_names if name not in FLOWS]
    if unknown:
        logger.error(f"Nieznane flow: {', '.join(unknown)} (dostepne: {', '.join(FLOWS)})")
        sys.exit(2)

    settings = get_settings()
    overrides = {}
    if locale:
        overrides["locale"] = normalize_locale(locale)
    if base_url:
        overrides["base_url"] = base_url.rstrip("/")
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    init_db()
    status = asyncio.run(run_suite(flow_names or list(FLOWS), settings, workers, headless))
    sys.exit(0 if status == "success" else 1)
