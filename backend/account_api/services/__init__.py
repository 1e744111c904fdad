"""Service layer.

Application services live in one sub-package per aggregate:

- :mod:`account_api.services.accounts`: registration, profile and password
  lifecycle (:class:`AccountService`).
- :mod:`account_api.services.auth`: login, authorize, refresh, logout
  (:class:`AuthService`).
- :mod:`account_api.services.tokens`: token issuance/rotation
  (:class:`TokenIssuer`) and the expired-token sweep
  (:class:`TokenGarbageCollector`).
- :mod:`account_api.services.prefectures`: reference data
  (:class:`PrefectureService`).

Shared primitives (base service, errors, ports) live in ``_shared``.
"""
