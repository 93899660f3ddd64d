from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from config import get_settings

DATABASE_URL = get_settings().database_url

connect_args = {"check_same_thread": False, "timeout": 30} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=False
)

# WAL — rownolegle sesje przegladarki zapisuja wyniki jednoczesnie,
# bez WAL SQLite blokuje cala baze przy kazdym zapisie
if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def set_wal_mode(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Tworzy tabele jesli nie istnieja."""
    from models import Base
    Base.metadata.create_all(bind=engine)
