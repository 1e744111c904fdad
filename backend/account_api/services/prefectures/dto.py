from __future__ import annotations

from dataclasses import dataclass

from account_api.models.prefecture import Prefecture


@dataclass(frozen=True, slots=True)
class PrefectureOut:
    """
    Output DTO for a prefecture.

    :param code: Region code (1..47).
    :param name: Japanese name.
    """

    code: int
    name: str

    @classmethod
    def from_model(cls, prefecture: Prefecture) -> PrefectureOut:
        return cls(code=prefecture.code, name=prefecture.name)
