from sqlalchemy import String, DateTime, ForeignKey, Enum, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base, now_utc
from datetime import datetime
import enum


class RunStatus(str, enum.Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class ScenarioRun(Base):
    """Jedno uruchomienie pojedynczego flow w osobnej sesji przegladarki."""
    __tablename__ = "scenario_runs"

    id: Mapped[int] = mapped_column(primary_key=True)
    suite_run_id: Mapped[int | None] = mapped_column(ForeignKey("suite_runs.id"))
    flow_name: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[RunStatus] = mapped_column(
        Enum(RunStatus), default=RunStatus.RUNNING, nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Wyniki
    error: Mapped[str | None] = mapped_column(Text)
    order_number: Mapped[str | None] = mapped_column(String(50))
    cart_route: Mapped[str | None] = mapped_column(String(20))
    item_count: Mapped[int | None] = mapped_column(Integer)
    screenshot_path: Mapped[str | None] = mapped_column(String(1000))

    suite_run: Mapped["SuiteRun"] = relationship(back_populates="scenario_runs")
    steps: Mapped[list["RunStep"]] = relationship(
        back_populates="run", cascade="all, delete-orphan", order_by="RunStep.id"
    )
    api_errors: Mapped[list["ApiError"]] = relationship(
        back_populates="run", cascade="all, delete-orphan"
    )

    @property
    def duration_seconds(self) -> int | None:
        if self.finished_at and self.started_at:
            return int((self.finished_at - self.started_at).total_seconds())
        return None

    def __repr__(self) -> str:
        return f"<ScenarioRun id={self.id} flow={self.flow_name} status={self.status}>"
