"""Unit tests for :class:`account_api.repositories.prefecture.PrefectureRepository`."""

from __future__ import annotations

import pytest

from account_api.repositories import PrefectureRepository
from account_api.services._shared.errors import ConflictError
from tests.factories.account import AccountFactory
from tests.factories.prefecture import PrefectureFactory


@pytest.fixture()
def repo(session):
    return PrefectureRepository(session=session)


def test_list_all_ordered_by_code(repo, all_prefectures):
    codes = [p.code for p in repo.list_all()]
    assert codes == list(range(1, 48))


def test_get_by_code(repo, all_prefectures):
    assert repo.get_by_code(13).name == "東京都"
    assert repo.get_by_code(99) is None


def test_delete_unreferenced(repo):
    prefecture = PrefectureFactory(code=47, name="沖縄県")
    repo.delete(prefecture)
    assert repo.get_by_code(47) is None


def test_delete_referenced_is_conflict(repo):
    account = AccountFactory()
    with pytest.raises(ConflictError):
        repo.delete(repo.get_by_code(account.prefecture_code))
    assert repo.get_by_code(13) is not None
