# account_api/services/prefectures/service.py
from __future__ import annotations

import logging

from account_api.services._shared.base import BaseService, read_operation, write_operation
from account_api.services._shared.errors import NotFoundError
from account_api.services.prefectures.dto import PrefectureOut

log = logging.getLogger(__name__)


class PrefectureService(BaseService):
    """Read access to the prefecture reference table, plus guarded deletion."""

    @read_operation
    def list(self) -> list[PrefectureOut]:
        """Return every prefecture ordered by code."""
        with self.ro_uow() as uow:
            return [PrefectureOut.from_model(p) for p in uow.prefectures.list_all()]

    @read_operation
    def get(self, code: int) -> PrefectureOut:
        """
        :raises NotFoundError: When ``code`` is unknown.
        """
        with self.ro_uow() as uow:
            prefecture = uow.prefectures.get_by_code(code)
            if prefecture is None:
                raise NotFoundError("Prefecture", code)
            return PrefectureOut.from_model(prefecture)

    @write_operation
    def delete(self, code: int) -> None:
        """
        Delete a prefecture no account references.

        :raises NotFoundError: When ``code`` is unknown.
        :raises ConflictError: While at least one account references it.
        """
        with self.rw_uow() as uow:
            prefecture = uow.prefectures.get_by_code(code)
            if prefecture is None:
                raise NotFoundError("Prefecture", code)
            uow.prefectures.delete(prefecture)
        log.info("Prefecture deleted: %s", code)
