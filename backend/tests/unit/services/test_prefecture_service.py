"""Unit tests for :class:`account_api.services.prefectures.PrefectureService`."""

from __future__ import annotations

import pytest

from account_api.services._shared.errors import ConflictError, NotFoundError
from account_api.services.prefectures import PrefectureService
from tests.factories.account import AccountFactory


@pytest.fixture()
def service():
    return PrefectureService()


def test_list(service, all_prefectures):
    out = service.list()
    assert len(out) == 47
    assert out[0].code == 1
    assert out[-1].name == "沖縄県"


def test_get(service, all_prefectures):
    assert service.get(13).name == "東京都"


def test_get_unknown(service, all_prefectures):
    with pytest.raises(NotFoundError):
        service.get(48)


def test_delete_referenced_prefecture_is_refused(service, session):
    AccountFactory()  # lives in 東京都 (13)
    with pytest.raises(ConflictError):
        service.delete(13)
    assert service.get(13).name == "東京都"


def test_delete_unreferenced(service, all_prefectures):
    service.delete(47)
    with pytest.raises(NotFoundError):
        service.get(47)
