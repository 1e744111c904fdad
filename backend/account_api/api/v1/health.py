"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from account_api.api.deps import json_response, timing
from account_api.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and (optional) Redis health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    finally:
        db.session.rollback()

    redis_status = "disabled"
    client = get_redis()
    if client is not None:
        try:
            client.ping()
            redis_status = "ok"
        except Exception:
            current_app.logger.exception("healthcheck.redis_error")
            redis_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "db": db_status, "redis": redis_status, "version": version}
    status = 200 if db_status == "ok" else 503
    return json_response(payload, status=status)
