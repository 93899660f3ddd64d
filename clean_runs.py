"""
Clean Runs — usuwa wszystkie zapisane runy.

Usuwa:
- suite_runs, scenario_runs, run_steps, api_errors
- logi z katalogu logs/

Użycie:
    python clean_runs.py              # interaktywne potwierdzenie
    python clean_runs.py --force      # bez pytania
    python clean_runs.py --keep-logs  # nie usuwaj logów
"""

import sys
from pathlib import Path

from sqlalchemy.orm import Session

from database import SessionLocal
from models.api_error import ApiError
from models.run import ScenarioRun
from models.run_step import RunStep
from models.suite_run import SuiteRun


def delete_runs(db: Session) -> dict[str, int]:
    """Kolejność ważna — od zależnych do głównych. Commit robi wołający."""
    counts = {}
    counts['run_steps'] = db.query(RunStep).delete()
    counts['api_errors'] = db.query(ApiError).delete()
    counts['scenario_runs'] = db.query(ScenarioRun).delete()
    counts['suite_runs'] = db.query(SuiteRun).delete()
    return counts


def delete_logs(logs_dir: Path = Path("logs")) -> int:
    if not logs_dir.exists():
        return 0
    log_files = list(logs_dir.glob("*.log"))
    for log_file in log_files:
        log_file.unlink()
    return len(log_files)


def clean_runs(force: bool = False, keep_logs: bool = False):
    """Usuwa wszystkie runy (i logi, jeśli nie keep_logs)."""

    if not force:
        print("⚠️  UWAGA: To usunie wszystkie zapisane runy!")
        confirm = input("Czy kontynuować? (yes/no): ")
        if confirm.lower() not in ['yes', 'y']:
            print("Anulowano.")
            return

    db = SessionLocal()
    try:
        print("\n🗑️  Usuwanie runów...")
        counts = delete_runs(db)
        db.commit()

        print("\n📊 Usunięte rekordy:")
        for table, count in counts.items():
            print(f"   {table}: {count}")

        if not keep_logs:
            print(f"\n🗑️  Usunięto {delete_logs()} plików logów")

        print("\n✅ Runy wyczyszczone!")

    except Exception as e:
        db.rollback()
        print(f"\n❌ Błąd: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    force = "--force" in sys.argv or "-f" in sys.argv
    keep_logs = "--keep-logs" in sys.argv

    clean_runs(force=force, keep_logs=keep_logs)
