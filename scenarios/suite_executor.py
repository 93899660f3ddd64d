"""
Suite Executor — uruchamia zestaw flow rownolegle i agreguje wyniki.
"""

import asyncio
import logging
import traceback
from pathlib import Path

from sqlalchemy.orm import Session

from config import Settings
from models.base import now_utc
from models.suite_run import SuiteRun, SuiteRunStatus
from scenarios.context import ScenarioContext
from scenarios.scenario_executor import ScenarioExecutor

logger = logging.getLogger(__name__)


class SuiteExecutor:
    """Orchestrator — tworzy suite_run, uruchamia flow w osobnych sesjach, liczy wynik."""

    def __init__(self, flow_names: list[str], settings: Settings, db: Session,
                 workers: int | None = None, headless: bool | None = None, log_dir: str = "logs"):
        self.flow_names = flow_names
        self.settings = settings
        self.db = db
        self.workers = workers or settings.workers
        self.headless = settings.headless if headless is None else headless
        self.log_dir = log_dir
        self.suite_run_id = None
        self.log_handler = None
        self.log_file = None

    async def run(self) -> SuiteRun:
        """Uruchamia wszystkie flow i zwraca suite_run z wynikami."""

        suite_run = SuiteRun(
            base_url=self.settings.base_url,
            locale=self.settings.locale,
            status=SuiteRunStatus.RUNNING,
            started_at=now_utc(),
            total_scenarios=len(self.flow_names),
        )
        self.db.add(suite_run)
        self.db.commit()
        self.db.refresh(suite_run)

        self.suite_run_id = suite_run.id
        self._setup_logging()

        logger.info(f"\n{'='*60}")
        logger.info(f"[SUITE RUN #{suite_run.id}] {self.settings.base_url}")
        logger.info(f"Flow: {len(self.flow_names)} | Workers: {self.workers}")
        logger.info(f"{'='*60}\n")

        semaphore = asyncio.Semaphore(self.workers)

        async def run_with_limit(flow_name: str) -> str:
            async with semaphore:
                # osobna sesja na scenariusz — wspolny jest tylko engine
                db_session = Session(bind=self.db.get_bind())
                try:
                    context = ScenarioContext.from_settings(self.settings, scenario_name=flow_name)
                    executor = ScenarioExecutor(
                        flow_name=flow_name,
                        context=context,
                        db=db_session,
                        suite_run_id=suite_run.id,
                        headless=self.headless,
                        browser_name=self.settings.browser,
                        slow_mo_ms=self.settings.slow_mo_ms,
                    )
                    run = await executor.run()
                    return run.status.value
                finally:
                    db_session.close()

        results = await asyncio.gather(*(run_with_limit(name) for name in self.flow_names),
                                       return_exceptions=True)

        for flow_name, result in zip(self.flow_names, results):
            if isinstance(result, Exception):
                logger.error(f"Exception w flow {flow_name}: {result}")
                self._write_raw_traceback(flow_name, result)

        self._finalize_suite_run(suite_run, results)

        if self.log_handler:
            logging.getLogger().removeHandler(self.log_handler)
            self.log_handler.close()

        return suite_run

    def _write_raw_traceback(self, flow_name: str, exception: BaseException):
        if not self.log_file:
            return
        tb_lines = traceback.format_exception(type(exception), exception, exception.__traceback__)
        with open(self.log_file, 'a', encoding='utf-8') as f:
            f.write('=' * 80 + '\n')
            f.write(f'ERROR in flow: {flow_name}\n')
            f.write('=' * 80 + '\n')
            f.write(''.join(tb_lines))
            f.write('=' * 80 + '\n\n')

    def _setup_logging(self):
        log_dir = Path(self.log_dir)
        log_dir.mkdir(exist_ok=True)
        self.log_file = log_dir / f"suite_run_{self.suite_run_id}.log"
        self.log_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        self.log_handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter('%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')
        self.log_handler.setFormatter(formatter)
        logging.getLogger().addHandler(self.log_handler)

    def _finalize_suite_run(self, suite_run: SuiteRun, results: list):
        success = sum(1 for r in results if r == 'success')
        failed  = len(results) - success

        suite_run.success_scenarios = success
        suite_run.failed_scenarios  = failed
        suite_run.finished_at       = now_utc()

        if failed == 0:
            suite_run.status = SuiteRunStatus.SUCCESS
        elif success == 0:
            suite_run.status = SuiteRunStatus.FAILED
        else:
            suite_run.status = SuiteRunStatus.PARTIAL

        self.db.commit()

        logger.info(f"\n{'='*60}")
        logger.info(f"[SUITE RUN #{suite_run.id}] COMPLETED")
        logger.info(f"Status: {suite_run.status.value.upper()}")
        logger.info(f"Success: {success} | Failed: {failed}")
        logger.info(f"Duration: {suite_run.duration_seconds}s")
        logger.info(f"{'='*60}\n")
