# dictionary_backend/app/services/language_service.py
from typing import List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from dictionary_backend.app.models import LanguageCode, Word


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


LANGUAGE_OPTIONS = [
    {"code": LanguageCode.en.value, "name": "English", "native_name": "English"},
    {"code": LanguageCode.da.value, "name": "Danish", "native_name": "Dansk"},
    {"code": LanguageCode.es.value, "name": "Spanish", "native_name": "Español"},
    {"code": LanguageCode.fr.value, "name": "French", "native_name": "Français"},
    {"code": LanguageCode.de.value, "name": "German", "native_name": "Deutsch"},
    {"code": LanguageCode.it.value, "name": "Italian", "native_name": "Italiano"},
    {"code": LanguageCode.pt.value, "name": "Portuguese", "native_name": "Português"},
    {"code": LanguageCode.ru.value, "name": "Russian", "native_name": "Русский"},
    {"code": LanguageCode.zh.value, "name": "Chinese", "native_name": "中文"},
    {"code": LanguageCode.ja.value, "name": "Japanese", "native_name": "日本語"},
    {"code": LanguageCode.ko.value, "name": "Korean", "native_name": "한국어"},
    {"code": LanguageCode.ar.value, "name": "Arabic", "native_name": "العربية"},
]

_BY_CODE = {opt["code"]: opt for opt in LANGUAGE_OPTIONS}


class LanguageService:

    @staticmethod
    def get_languages() -> List[dict]:
        return [dict(opt) for opt in LANGUAGE_OPTIONS]

    @staticmethod
    def get_language(code: str) -> Optional[dict]:
        opt = _BY_CODE.get(code)
        return dict(opt) if opt else None

    @staticmethod
    def get_words_by_language(
        db: Session, code: LanguageCode, page: int = 1, page_size: int = 20
    ) -> Tuple[List[Word], int]:
        query = db.query(Word).filter(Word.language_code == code)
        total = query.count()
        words = (
            query.order_by(Word.word.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return words, total

    @staticmethod
    def search_words(db: Session, code: LanguageCode, text: str, limit: int = 10) -> List[Word]:
        # 不区分大小写的包含匹配，前缀命中排在前面，再按字母序
        needle = _escape_like(text.lower())
        lowered = func.lower(Word.word)
        prefix_first = case((lowered.like(f"{needle}%", escape="\\"), 0), else_=1)
        return (
            db.query(Word)
            .filter(Word.language_code == code, lowered.like(f"%{needle}%", escape="\\"))
            .order_by(prefix_first, Word.word.asc())
            .limit(limit)
            .all()
        )
