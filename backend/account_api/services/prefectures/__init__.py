from .service import PrefectureService

__all__ = ["PrefectureService"]
