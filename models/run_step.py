from sqlalchemy import String, DateTime, ForeignKey, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models.base import Base
from datetime import datetime


class RunStep(Base):
    """
    Pojedynczy krok flow (span): nazwa, czas trwania, wynik.
    Pozwala zobaczyc gdzie dokladnie scenariusz sie wysypal.
    """
    __tablename__ = "run_steps"

    id: Mapped[int] = mapped_column(primary_key=True)
    run_id: Mapped[int] = mapped_column(ForeignKey("scenario_runs.id"), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)   # ok / failed
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_ms: Mapped[int] = mapped_column(Integer, default=0)
    error: Mapped[str | None] = mapped_column(Text)

    run: Mapped["ScenarioRun"] = relationship(back_populates="steps")

    def __repr__(self) -> str:
        return f"<RunStep {self.name} {self.status} {self.duration_ms}ms>"
