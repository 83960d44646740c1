"""Database access with transactions that repositories share implicitly."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from invoicesrv.models import Base

T = TypeVar("T")

_current_session: ContextVar[Optional[Session]] = ContextVar(
    "invoicesrv_current_session", default=None
)


class Database:
    """Hands out sessions, reusing the one of a running transaction if there is one."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_dsn(cls, dsn: str) -> "Database":
        """Connect to the database named by a SQLAlchemy URL."""
        return cls(create_engine(dsn))

    def create_all(self) -> None:
        """Create every table the models define."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield the running transaction's session, or a new one committed on exit."""
        active = _current_session.get()
        if active is not None:
            yield active
            return
        with Session(self.engine, expire_on_commit=False) as session:
            with session.begin():
                yield session


class Transaction:
    """Runs a unit of work inside one database transaction."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_dsn(cls, dsn: str) -> "Transaction":
        """Connect to the database named by a SQLAlchemy URL."""
        return cls(create_engine(dsn))

    def run_txn(self, tx_func: Callable[[], T]) -> T:
        """Call ``tx_func`` in a transaction; commit on return, roll back on any error.

        While ``tx_func`` runs, :meth:`Database.session` yields this transaction's
        session. Errors raised by ``tx_func`` propagate after the rollback.
        """
        with Session(self.engine, expire_on_commit=False) as session:
            token = _current_session.set(session)
            try:
                with session.begin():
                    return tx_func()
            finally:
                _current_session.reset(token)