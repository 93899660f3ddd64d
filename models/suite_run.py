from sqlalchemy import String, DateTime, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base, now_utc
from datetime import datetime
import enum


class SuiteRunStatus(str, enum.Enum):
    RUNNING = "running"
    SUCCESS = "success"  # wszystkie flow ok
    FAILED = "failed"    # zaden flow nie przeszedl
    PARTIAL = "partial"  # czesc przeszla, czesc nie


class SuiteRun(Base):
    """
    Jedno uruchomienie zestawu flow (np. `python main.py --workers 4`).
    Agreguje scenario_runs.
    """
    __tablename__ = "suite_runs"

    id: Mapped[int] = mapped_column(primary_key=True)
    base_url: Mapped[str] = mapped_column(String(500), nullable=False)
    locale: Mapped[str] = mapped_column(String(10), default="en_US")

    status: Mapped[SuiteRunStatus] = mapped_column(
        Enum(SuiteRunStatus), default=SuiteRunStatus.RUNNING, nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    total_scenarios: Mapped[int] = mapped_column(Integer, default=0)
    success_scenarios: Mapped[int] = mapped_column(Integer, default=0)
    failed_scenarios: Mapped[int] = mapped_column(Integer, default=0)

    scenario_runs: Mapped[list["ScenarioRun"]] = relationship(
        back_populates="suite_run", cascade="all, delete-orphan"
    )

    @property
    def duration_seconds(self) -> int | None:
        if self.finished_at and self.started_at:
            return int((self.finished_at - self.started_at).total_seconds())
        return None

    def __repr__(self) -> str:
        return f"<SuiteRun id={self.id} status={self.status}>"
