"""SQLAlchemy-backed unit of work for the release store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from releasedesk.adapters.sqlalchemy.mappings import start_mappers
from releasedesk.adapters.sqlalchemy.migrations import upgrade_head
from releasedesk.adapters.sqlalchemy.repositories import (
    SqlAlchemyReleaseRepository,
    SqlAlchemyTrackRepository,
)
from releasedesk.config import DatabaseConfig, get_database_config
from releasedesk.domain.errors import StoreConflictError, TransientStoreError
from releasedesk.domain.ports.unit_of_work import ReleaseRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

# Errors after which the outcome of the statement is unknown but retrying is safe.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call releasedesk.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def build_engine(config: DatabaseConfig) -> Engine:
    """Create an engine whose connections give up after ``config.timeout_seconds``."""

    if config.is_sqlite:
        return create_engine(
            config.uri,
            future=True,
            connect_args={"timeout": config.timeout_seconds, "check_same_thread": False},
        )
    return create_engine(
        config.uri,
        future=True,
        pool_pre_ping=True,
        pool_timeout=config.timeout_seconds,
    )


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = get_database_config()
        if database_uri is not None:
            config = DatabaseConfig(uri=database_uri, timeout_seconds=config.timeout_seconds)
        engine = build_engine(config)
    start_mappers()
    upgrade_head(engine=engine)

    _STATE.engine = engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Driver-level I/O failures leave as ``TransientStoreError`` and uniqueness
    violations as ``StoreConflictError``; the original exception is chained.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory: sessionmaker[Session] = session_factory or _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
            self.session.close()
        finally:
            self.session = None
        if isinstance(exc_value, TRANSIENT_ERRORS):
            raise TransientStoreError(str(exc_value)) from exc_value
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise StoreConflictError(str(exc.orig)) from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[ReleaseRepositories]):
    """Unit of work managing SQLAlchemy sessions for releases and tracks."""

    def _build_repositories(self, session: Session) -> ReleaseRepositories:
        return ReleaseRepositories(
            releases=SqlAlchemyReleaseRepository(session),
            tracks=SqlAlchemyTrackRepository(session),
        )


if TYPE_CHECKING:
    from releasedesk.domain.ports.unit_of_work import ReleaseUnitOfWork

    _uow_check: ReleaseUnitOfWork = SqlAlchemyUnitOfWork()
