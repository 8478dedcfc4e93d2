from contextlib import contextmanager

from sqlalchemy.orm import sessionmaker

from inventory_tracker.database.engine import engine

# expire_on_commit=False keeps returned records readable after the gateway commits
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@contextmanager
def session_scope():
    """Session for command-line scripts; closed on exit, never committed here."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db():
    with session_scope() as db:
        yield db
