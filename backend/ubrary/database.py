from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base
import logging
import os

from .errors import PersistenceError, WorkflowError

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ubrary.db")

if DATABASE_URL.startswith("sqlite"):
    sqlite_args = {"check_same_thread": False, "timeout": 30}
else:
    sqlite_args = {}

engine = create_engine(DATABASE_URL, connect_args=sqlite_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

logger = logging.getLogger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Commit the enclosed unit of work, or roll all of it back.

    Workflow errors propagate unchanged; storage failures surface as
    :class:`PersistenceError` so callers know a retry is safe.
    """

    try:
        yield db
        db.commit()
    except WorkflowError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Rolled back workflow transaction after storage failure: %s", exc)
        raise PersistenceError() from exc
