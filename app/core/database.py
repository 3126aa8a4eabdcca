import re
import logging
from typing import Any, Dict, List, Sequence

from fastapi import Depends
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.SQLALCHEMY_DATABASE_URI

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # Single shared connection so an in-memory database survives across sessions
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,
        max_overflow=20
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Single-quoted literals are matched first so a $N inside one is left alone
_POSITIONAL = re.compile(r"'(?:[^']|'')*'|\$(\d+)")


def _to_named(match: re.Match) -> str:
    if match.group(1) is None:
        return match.group(0)
    return f":p{match.group(1)}"


class QueryExecutor:
    """
    Runs SQL written with $1..$N positional placeholders.

    The placeholders are rewritten to named bind parameters (:p1..:pN) and
    the positional argument list is bound by index, so values never enter
    the statement text. Text inside single-quoted literals is not rewritten.
    Templates must not spell a bind-style ":name" anywhere, since
    sqlalchemy.text treats those as parameters too.
    """

    def __init__(self, session: Session):
        self.session = session

    def execute(self, sql: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a statement and commit.

        Returns:
            Result rows as dicts, or an empty list for statements without rows
        """
        statement = _POSITIONAL.sub(_to_named, sql)
        params = {f"p{idx}": value for idx, value in enumerate(args, start=1)}
        logger.debug(f"Executing SQL with {len(params)} parameter(s)")

        try:
            result = self.session.execute(text(statement), params)
            rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return rows


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_executor(db: Session = Depends(get_db)) -> QueryExecutor:
    """Dependency wrapping the request's session in a QueryExecutor."""
    return QueryExecutor(db)


def init_db():
    """Register the table models and create any missing tables."""
    from app.models import company, job, user  # noqa: F401
    Base.metadata.create_all(bind=engine)
