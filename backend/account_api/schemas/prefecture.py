"""Prefecture Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields

from .common import BaseSchema


class PrefectureSchema(BaseSchema):
    """Serialize prefecture reference rows."""

    code = fields.Integer(dump_only=True)
    name = fields.String(dump_only=True)
