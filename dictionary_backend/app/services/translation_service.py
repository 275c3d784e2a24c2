# dictionary_backend/app/services/translation_service.py
import logging
from typing import Any, Dict, Optional

import httpx

from dictionary_backend.app.core.config import config
from dictionary_backend.app.utils.http_client import get_http_client

logger = logging.getLogger(__name__)


class TranslationError(RuntimeError):
    pass


async def translate(
    text: str,
    source_lang: str,
    dest_lang: str,
    options: Optional[Dict[str, Any]] = None,
    url: Optional[str] = None,
) -> Any:
    """Forward the request to the translation service and return its JSON."""
    payload = {
        "text": text,
        "sourceLang": source_lang,
        "destLang": dest_lang,
        "options": options or {},
    }
    target = url or config.TRANSLATION_API_URL
    try:
        async with get_http_client() as client:
            response = await client.post(target, json=payload)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Translation service answered %s: %s", e.response.status_code, e.response.text[:200])
        raise TranslationError(f"Translation service returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.error("Translation service unreachable: %s", e)
        raise TranslationError("Translation service is unavailable") from e
    except ValueError as e:
        raise TranslationError("Translation service returned invalid JSON") from e
