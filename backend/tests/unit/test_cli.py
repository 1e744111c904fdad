"""Tests for the ``flask tokens`` and ``flask seed`` commands."""

from __future__ import annotations

from datetime import timedelta

from account_api.core.clock import utcnow
from account_api.infra import scheduler
from account_api.models import Prefecture
from tests.factories.jwt_token import JwtTokenFactory


def test_tokens_sweep(app, session):
    now = utcnow()
    JwtTokenFactory(
        access_expired_at=now - timedelta(hours=2),
        refresh_expired_at=now - timedelta(hours=1),
    )
    JwtTokenFactory()

    result = app.test_cli_runner().invoke(args=["tokens", "sweep"])

    assert result.exit_code == 0
    assert "Removed 1 expired token pair(s)." in result.output


def test_tokens_sweep_skipped_while_running(app, session):
    assert scheduler._process_lock.acquire()
    try:
        result = app.test_cli_runner().invoke(args=["tokens", "sweep"])
    finally:
        scheduler._process_lock.release()

    assert result.exit_code != 0
    assert "Another sweep is running" in result.output


def test_seed_run(app, session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    second = runner.invoke(args=["seed", "run", "--verbose"])

    assert first.exit_code == 0
    assert "prefectures: 47 created, 0 already present" in first.output
    assert "prefectures: 0 created, 47 already present" in second.output
    assert session.query(Prefecture).count() == 47


def test_seed_fresh_requires_confirmation(app, session):
    result = app.test_cli_runner().invoke(args=["seed", "fresh"], input="n\n")
    assert result.exit_code != 0
    assert session.query(Prefecture).count() == 0


def test_seed_fresh_refused_outside_debug_and_testing(app, session, monkeypatch):
    monkeypatch.setitem(app.config, "TESTING", False)
    monkeypatch.setitem(app.config, "DEBUG", False)

    result = app.test_cli_runner().invoke(args=["seed", "fresh", "--yes"])

    assert result.exit_code != 0
    assert "disabled outside debug and testing" in result.output


def test_scheduler_disabled_in_testing(app):
    assert scheduler.SCHEDULER_KEY not in app.extensions
