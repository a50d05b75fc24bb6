# barberbook/db.py

from sqlmodel import SQLModel, Session, create_engine

from barberbook.config import get_settings

settings = get_settings()


def make_engine(url: str = settings.DATABASE_URL):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(url, echo=settings.DB_ECHO, connect_args=connect_args)


engine = make_engine()


def create_db_and_tables(bind=None):
    import barberbook.models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
