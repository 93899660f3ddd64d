"""
RunRecorder — diagnostyka jednego scenariusza.

Odpowiedzialnosci:
  1. Logger z prefiksem scenariusza (wstrzykiwany do page objects)
  2. Kroki (spany) — nazwa, czas, wynik, blad
  3. Bledy API (HTTP > 400) przechwycone z przegladarki
  4. Screenshoty etapow

Jeden recorder = jeden scenariusz. Nic nie jest wspoldzielone miedzy sesjami.
"""
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from sqlalchemy.orm import Session

from models.api_error import ApiError
from models.base import now_utc
from models.run import ScenarioRun
from models.run_step import RunStep

MAX_BODY_LENGTH = 250


class ScenarioLogger(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[{self.extra['scenario']}] {msg}", kwargs


@dataclass
class StepRecord:
    name: str
    status: str
    started_at: datetime
    duration_ms: int
    error: str | None = None


class RunRecorder:
    def __init__(
        self,
        scenario_name: str,
        screenshot_dir: str | None = None,
        api_error_exclusions: list[str] | None = None,
    ):
        self.scenario_name = scenario_name
        self.screenshot_dir = screenshot_dir
        self.logger = ScenarioLogger(logging.getLogger("scenario"), {"scenario": scenario_name})
        self.steps: list[StepRecord] = []
        self.api_errors: list[dict] = []
        self.screenshots: dict[str, str] = {}  # stage → sciezka
        self._exclusions = [e.lower() for e in (api_error_exclusions or [])]
        self._page: Page | None = None

    # ── Przegladarka ──────────────────────────────────────────────────────────

    def attach(self, page: Page) -> None:
        self._page = page
        page.on("response", self._on_response)

    async def _on_response(self, response: Response) -> None:
        if response.status <= 400:
            return
        if any(pattern in response.url.lower() for pattern in self._exclusions):
            return
        try:
            body = await response.text()
        except PlaywrightError:
            body = None
        self.api_errors.append({
            'endpoint':      response.url,
            'method':        response.request.method,
            'status_code':   response.status,
            'response_body': body,
        })
        self.logger.warning(f"API {response.request.method} {response.status} {response.url}")

    async def screenshot(self, stage: str) -> str | None:
        if not self.screenshot_dir or self._page is None:
            return None
        Path(self.screenshot_dir).mkdir(parents=True, exist_ok=True)
        path = f"{self.screenshot_dir}/{stage}.png"
        try:
            await self._page.screenshot(path=path, full_page=True)
        except PlaywrightError as e:
            # screenshot nie moze przerwac runu
            self.logger.warning(f"Screenshot '{stage}' nieudany: {e}")
            return None
        self.screenshots[stage] = path
        return path

    # ── Kroki ─────────────────────────────────────────────────────────────────

    @asynccontextmanager
    async def step(self, name: str) -> AsyncIterator[None]:
        started_at = now_utc()
        t0 = time.monotonic()
        self.logger.info(f"→ {name}")
        try:
            yield
        except Exception as e:
            self._finish(name, started_at, t0, "failed", f"{e.__class__.__name__}: {e}")
            raise
        self._finish(name, started_at, t0, "ok")

    def _finish(self, name: str, started_at: datetime, t0: float, status: str, error: str | None = None):
        duration_ms = int((time.monotonic() - t0) * 1000)
        self.steps.append(StepRecord(
            name=name, status=status, started_at=started_at, duration_ms=duration_ms, error=error,
        ))
        if error:
            self.logger.error(f"✗ {name} ({duration_ms} ms): {error}")
        else:
            self.logger.info(f"✓ {name} ({duration_ms} ms)")

    @property
    def failed_step(self) -> StepRecord | None:
        return next((s for s in self.steps if s.status == "failed"), None)

    # ── Zapis ─────────────────────────────────────────────────────────────────

    def save(self, db: Session, run: ScenarioRun) -> None:
        """Dopisuje kroki i bledy API do sesji. Commit robi wolajacy."""
        db.add_all([
            RunStep(
                run_id=run.id,
                name=s.name,
                status=s.status,
                started_at=s.started_at,
                duration_ms=s.duration_ms,
                error=s.error,
            )
            for s in self.steps
        ])

        for err in self.api_errors:
            body = err.get('response_body')
            if body and len(body) > MAX_BODY_LENGTH:
                body = body[:MAX_BODY_LENGTH]
            db.add(ApiError(
                run_id=run.id,
                endpoint=err['endpoint'],
                method=err['method'],
                status_code=err['status_code'],
                response_body=body,
            ))

        if self.screenshots:
            run.screenshot_path = list(self.screenshots.values())[-1]
