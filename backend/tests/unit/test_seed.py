"""Unit tests for the prefecture seed."""

from __future__ import annotations

from account_api.core.extensions import db
from account_api.models import Prefecture
from account_api.seeds.prefectures import PREFECTURES, seed_prefectures
from tests.factories.prefecture import PrefectureFactory


def test_table_has_47_unique_codes():
    codes = [code for code, _ in PREFECTURES]
    assert codes == list(range(1, 48))


def test_seed_inserts_missing_rows(session):
    PrefectureFactory(code=13, name="東京都")
    summary = seed_prefectures(db)
    assert summary == {"created": 46, "existing": 1}
    assert session.query(Prefecture).count() == 47


def test_seed_is_idempotent_and_fixes_names(session):
    seed_prefectures(db)
    session.get(Prefecture, 1).name = "蝦夷"
    session.commit()

    summary = seed_prefectures(db)

    assert summary == {"created": 0, "existing": 47}
    assert session.get(Prefecture, 1).name == "北海道"
