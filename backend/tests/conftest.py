"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction against an in-memory SQLite
database; the session joins it through a SAVEPOINT, so unit-of-work commits
stay visible within the test and are rolled back afterwards.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from account_api.core.config import TestingConfig, engine_options
from account_api.core.extensions import db as _db  # Flask-SQLAlchemy instance
from account_api.factory import create_app  # application factory under test
from account_api.seeds.prefectures import PREFECTURES


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Never starts the sweep scheduler nor talks to Redis.
    - Hashes with a cheap PBKDF2 method to keep API tests fast.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(
        SQLALCHEMY_DATABASE_URI, pool_timeout=5, statement_timeout_ms=5000
    )
    ACCESS_TOKEN_SECONDS = 900
    REFRESH_TOKEN_SECONDS = 3600


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by the outer transaction of each test.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    ``join_transaction_mode="create_savepoint"`` makes ``commit()`` release
    a SAVEPOINT instead of committing, and ``rollback()`` roll back to it,
    while repository-level ``begin_nested()`` blocks nest inside.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session joined to it through a SAVEPOINT
    SessionFactory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
    )
    scoped = scoped_session(SessionFactory)

    # 3) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker("ja_JP")
    Faker.seed(1337)
    return fk


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session.

    A fresh application context per test keeps ``g`` (request id, account
    id) from leaking between tests.
    """
    with app.app_context():
        yield app.test_client()


@pytest.fixture()
def all_prefectures(session):
    """Seed the full prefecture table inside the test transaction."""
    from account_api.models import Prefecture

    existing = {p.code for p in session.query(Prefecture)}
    session.add_all(Prefecture(code=c, name=n) for c, n in PREFECTURES if c not in existing)
    session.commit()
    return PREFECTURES


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
