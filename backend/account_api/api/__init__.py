"""API blueprint package aggregating versioned endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask

from account_api.core.errors import render_api_error
from account_api.services._shared.base import BaseService
from account_api.services._shared.errors import ServiceError


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries, typically the API version segment such
        as ``"/api/v1"``.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.rstrip("/"), rel_prefix.strip("/")] if segment
        )
        full_prefix = "/" + full_prefix if not full_prefix.startswith("/") else full_prefix
        app.register_blueprint(bp, url_prefix=full_prefix)


def _handle_service_error(err: ServiceError):
    """Render service-level errors through their HTTP translation."""
    translated = BaseService().translate_exceptions(err)
    return render_api_error(translated)  # type: ignore[arg-type]


def init_app(app: Flask) -> None:
    """Register the available API versions and the service error handler."""

    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from account_api.api.v1 import API_VERSION as V1
    from account_api.api.v1 import REGISTRY as V1_REGISTRY

    register_blueprint_group(app, base_prefix=f"{api_base}/{V1}", entries=V1_REGISTRY)
    app.register_error_handler(ServiceError, _handle_service_error)


__all__ = ["init_app", "register_blueprint_group"]
