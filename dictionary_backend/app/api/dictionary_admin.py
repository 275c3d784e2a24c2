# dictionary_backend/app/api/dictionary_admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from dictionary_backend.app.core.database import get_db
from dictionary_backend.app.models import (
    DifficultyLevel,
    LanguageCode,
    PartOfSpeech,
    WordDetails,
)
from dictionary_backend.app.schemas.dictionary import (
    AudioAttach,
    CategoryIn,
    CategoryOut,
    DefinitionUpdate,
    ExampleIn,
    ListCreate,
    ListOut,
    ListUpdate,
    ListWordsAdd,
    WordPage,
    WordUpdate,
)
from dictionary_backend.app.services import dictionary_service
from learning_backend.routes.auth_utils import get_current_admin_user

router = APIRouter(dependencies=[Depends(get_current_admin_user)])


def _word_or_404(db: Session, word_id: int):
    word = dictionary_service.get_word(db, word_id)
    if not word:
        raise HTTPException(status_code=404, detail="Word not found")
    return word


def _definition_or_404(db: Session, definition_id: int):
    definition = dictionary_service.get_definition(db, definition_id)
    if not definition:
        raise HTTPException(status_code=404, detail="Definition not found")
    return definition


def _list_or_404(db: Session, list_id: str):
    vocab_list = dictionary_service.get_list(db, list_id)
    if not vocab_list:
        raise HTTPException(status_code=404, detail="List not found")
    return vocab_list


# -------------------- 单词 --------------------
@router.get("/dictionary", response_model=WordPage)
def list_words(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    language_code: Optional[LanguageCode] = None,
    part_of_speech: Optional[PartOfSpeech] = None,
    db: Session = Depends(get_db),
):
    words, total = dictionary_service.list_words(
        db, page, page_size, search=search,
        language_code=language_code, part_of_speech=part_of_speech,
    )
    return {"words": words, "total": total, "page": page, "page_size": page_size}


@router.get("/dictionary/words/{word_id}")
def get_word_details(word_id: int, db: Session = Depends(get_db)):
    return dictionary_service.word_to_dict(_word_or_404(db, word_id))


@router.put("/dictionary/words/{word_id}")
def update_word(word_id: int, payload: WordUpdate, db: Session = Depends(get_db)):
    word = _word_or_404(db, word_id)
    word = dictionary_service.update_word(db, word, payload.model_dump(exclude_unset=True))
    return dictionary_service.word_to_dict(word)


@router.delete("/dictionary/words/{word_id}")
def delete_word(word_id: int, db: Session = Depends(get_db)):
    word = _word_or_404(db, word_id)
    removed = dictionary_service.delete_word(db, word)
    return {"deleted": True, "definitions_removed": removed}


# -------------------- 释义 / 例句 --------------------
@router.put("/dictionary/definitions/{definition_id}")
def update_definition(definition_id: int, payload: DefinitionUpdate, db: Session = Depends(get_db)):
    definition = _definition_or_404(db, definition_id)
    definition = dictionary_service.update_definition(db, definition, payload.model_dump(exclude_unset=True))
    return {"id": definition.id, "definition": definition.definition}


@router.post("/dictionary/definitions/{definition_id}/examples", status_code=status.HTTP_201_CREATED)
def add_example(definition_id: int, payload: ExampleIn, db: Session = Depends(get_db)):
    definition = _definition_or_404(db, definition_id)
    example = dictionary_service.add_example(db, definition, payload.model_dump())
    return {"id": example.id, "example": example.example, "definition_id": example.definition_id}


@router.delete("/dictionary/examples/{example_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_example(example_id: int, db: Session = Depends(get_db)):
    if not dictionary_service.delete_example(db, example_id):
        raise HTTPException(status_code=404, detail="Example not found")
    return None


# -------------------- 音频 --------------------
@router.post("/dictionary/word-details/{word_details_id}/audio", status_code=status.HTTP_201_CREATED)
def attach_audio(word_details_id: int, payload: AudioAttach, db: Session = Depends(get_db)):
    details = db.query(WordDetails).filter(WordDetails.id == word_details_id).first()
    if not details:
        raise HTTPException(status_code=404, detail="Word details not found")
    audio = dictionary_service.attach_audio(db, details, payload.model_dump())
    return {"id": audio.id, "url": audio.url, "word_details_id": word_details_id}


@router.delete("/dictionary/word-details/{word_details_id}/audio/{audio_id}", status_code=status.HTTP_204_NO_CONTENT)
def detach_audio(word_details_id: int, audio_id: int, db: Session = Depends(get_db)):
    if not dictionary_service.detach_audio(db, word_details_id, audio_id):
        raise HTTPException(status_code=404, detail="Audio is not attached to these word details")
    return None


# -------------------- 分类 --------------------
@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return dictionary_service.list_categories(db)


@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    # 重名交给唯一约束 -> 409
    return dictionary_service.create_category(db, payload.name, payload.description)


# -------------------- 词表 --------------------
@router.get("/lists", response_model=List[ListOut])
def list_lists(
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    difficulty_level: Optional[DifficultyLevel] = None,
    language_code: Optional[LanguageCode] = None,
    is_public: Optional[bool] = None,
    include_deleted: bool = False,
    db: Session = Depends(get_db),
):
    return dictionary_service.list_lists(
        db,
        search=search,
        category_id=category_id,
        difficulty_level=difficulty_level,
        language_code=language_code,
        is_public=is_public,
        include_deleted=include_deleted,
    )


@router.post("/lists", response_model=ListOut, status_code=status.HTTP_201_CREATED)
def create_list(payload: ListCreate, db: Session = Depends(get_db)):
    return dictionary_service.create_list(db, payload.model_dump())


@router.get("/lists/{list_id}", response_model=ListOut)
def get_list(list_id: str, db: Session = Depends(get_db)):
    return _list_or_404(db, list_id)


@router.put("/lists/{list_id}", response_model=ListOut)
def update_list(list_id: str, payload: ListUpdate, db: Session = Depends(get_db)):
    vocab_list = _list_or_404(db, list_id)
    return dictionary_service.update_list(db, vocab_list, payload.model_dump(exclude_unset=True))


@router.post("/lists/{list_id}/words")
def add_words_to_list(list_id: str, payload: ListWordsAdd, db: Session = Depends(get_db)):
    vocab_list = _list_or_404(db, list_id)
    added = dictionary_service.add_words_to_list(db, vocab_list, payload.definition_ids)
    return {"added": added, "word_count": vocab_list.word_count}


@router.delete("/lists/{list_id}", response_model=ListOut)
def delete_list(list_id: str, db: Session = Depends(get_db)):
    return dictionary_service.soft_delete_list(db, _list_or_404(db, list_id))


@router.post("/lists/{list_id}/restore", response_model=ListOut)
def restore_list(list_id: str, db: Session = Depends(get_db)):
    return dictionary_service.restore_list(db, _list_or_404(db, list_id))
