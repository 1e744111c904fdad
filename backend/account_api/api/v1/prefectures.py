"""Prefecture reference endpoints (public)."""

from __future__ import annotations

from flask import Blueprint

from account_api.api.deps import get_prefecture_service, json_response, timing
from account_api.schemas import PrefectureSchema

bp = Blueprint("prefectures", __name__, url_prefix="/prefectures")

prefecture_schema = PrefectureSchema()
prefecture_list_schema = PrefectureSchema(many=True)


@bp.get("")
@timing
def list_prefectures():
    """Return the 47 prefectures ordered by code."""

    return json_response({"data": prefecture_list_schema.dump(get_prefecture_service().list())})


@bp.get("/<int:code>")
@timing
def get_prefecture(code: int):
    """Return one prefecture."""

    return json_response({"data": prefecture_schema.dump(get_prefecture_service().get(code))})
