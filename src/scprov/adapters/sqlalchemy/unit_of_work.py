"""SQLAlchemy-backed unit of work for provisioning runs.

The adapter keeps one engine per process. ``startup()`` binds it (migrating
the schema on the way) and every unit of work opens a fresh session on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from scprov.adapters.sqlalchemy.mappings import enforce_sqlite_foreign_keys, start_mappers
from scprov.adapters.sqlalchemy.migrations import upgrade_head
from scprov.adapters.sqlalchemy.repositories import (
    SqlAlchemyEntityStore,
    SqlAlchemyLookupRepository,
    SqlAlchemyPayGradeRepository,
)
from scprov.config import get_database_config
from scprov.domain.ports.unit_of_work import ProvisioningRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before ``startup()`` or configured twice."""


@dataclass(slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


_binding: _Binding | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one for ``database_uri``) and migrate it.

    Engines created here get SQLite foreign-key enforcement; a caller-supplied
    engine is used as given.
    """

    global _binding  # noqa: PLW0603

    if _binding is not None and not force:
        raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind")

    if engine is None:
        uri = database_uri or get_database_config().uri
        log.info("Creating engine for %s", uri)
        engine = create_engine(uri, future=True)
        enforce_sqlite_foreign_keys(engine)

    start_mappers()
    upgrade_head(engine=engine)
    _binding = _Binding(engine=engine, sessions=sessionmaker(bind=engine, expire_on_commit=False))


def configured_engine() -> Engine | None:
    return _binding.engine if _binding is not None else None


def is_started() -> bool:
    return _binding is not None


def shutdown() -> None:
    """Dispose the bound engine and forget it (mostly for tests)."""

    global _binding  # noqa: PLW0603

    if _binding is not None:
        _binding.engine.dispose()
    _binding = None


class SqlAlchemyProvisioningUnitOfWork:
    """One session shared by the entity store, lookups and pay grades.

    The repositories commit as they write, so ``rollback`` here only discards
    whatever is still pending. Undoing a run is the job of its ledger.
    """

    def __init__(self) -> None:
        if _binding is None:
            raise StartupError(
                "SQLAlchemy adapter not started. Call scprov.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self._sessions = _binding.sessions
        self._session: Session | None = None
        self._repositories: ProvisioningRepositories | None = None

    def __enter__(self) -> SqlAlchemyProvisioningUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self._sessions()
        self._repositories = ProvisioningRepositories(
            entities=SqlAlchemyEntityStore(self._session),
            lookups=SqlAlchemyLookupRepository(self._session),
            pay_grades=SqlAlchemyPayGradeRepository(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self._session = None
        self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not open")
        return self._session

    @property
    def repositories(self) -> ProvisioningRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from scprov.domain.ports.unit_of_work import ProvisioningUnitOfWork

    _uow_check: ProvisioningUnitOfWork = SqlAlchemyProvisioningUnitOfWork()
