from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from scprov.adapters.sqlalchemy import enforce_sqlite_foreign_keys, start_mappers
from scprov.adapters.sqlalchemy.migrations import upgrade_head
from scprov.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyProvisioningUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.provisioning import FakeProvisioningBackend, make_backend
from tests.helpers.reference_data import SeededReferenceData, seed_reference_data

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def backend() -> FakeProvisioningBackend:
    return make_backend()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    enforce_sqlite_foreign_keys(engine)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(sqlite_session: Session) -> SeededReferenceData:
    return seed_reference_data(sqlite_session)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyProvisioningUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyProvisioningUnitOfWork:
        return SqlAlchemyProvisioningUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
