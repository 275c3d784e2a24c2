# learning_backend/routes/translation_routes.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from dictionary_backend.app.services import translation_service
from learning_backend.routes.auth_utils import get_current_user

router = APIRouter(tags=["translate"])


class TranslateRequest(BaseModel):
    text: str
    source_lang: str = Field("auto", alias="sourceLang")
    dest_lang: str = Field(..., alias="destLang")
    options: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


@router.post("/translate")
async def translate(payload: TranslateRequest, current_user=Depends(get_current_user)):
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    try:
        return await translation_service.translate(
            payload.text, payload.source_lang, payload.dest_lang, payload.options
        )
    except translation_service.TranslationError as e:
        raise HTTPException(status_code=502, detail=str(e))
