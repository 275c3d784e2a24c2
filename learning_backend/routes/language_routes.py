# learning_backend/routes/language_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_cache.decorator import cache
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import LanguageCode
from dictionary_backend.app.services.language_service import LanguageService

router = APIRouter(prefix="/languages", tags=["languages"])

NS_LANGUAGES = "languages:list"


def _word_to_dict(w):
    return {
        "id": w.id,
        "word": w.word,
        "language_code": w.language_code.value,
        "phonetic_general": w.phonetic_general,
        "frequency_general": w.frequency_general,
    }


@router.get("")
@cache(expire=3600, namespace=NS_LANGUAGES)
async def list_languages():
    return LanguageService.get_languages()


@router.get("/{code}")
def get_language(code: str):
    language = LanguageService.get_language(code)
    if not language:
        raise HTTPException(status_code=404, detail="Language not found")
    return language


@router.get("/{code}/words")
def list_language_words(
    code: LanguageCode,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    words, total = LanguageService.get_words_by_language(db, code, page, page_size)
    return {
        "words": [_word_to_dict(w) for w in words],
        "total": total,
        "page": page,
        "page_size": page_size,
    }


@router.get("/{code}/words/search")
def search_language_words(
    code: LanguageCode,
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return [_word_to_dict(w) for w in LanguageService.search_words(db, code, q, limit)]
