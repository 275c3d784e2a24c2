# dictionary_backend/app/services/image_service.py
"""
释义配图：从 Pexels 搜索、入库 (images 表按 url 去重)、挂到释义上。
"""
import logging
import random
import re
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from dictionary_backend.app.models import (
    Definition,
    Image,
    Word,
    WordDefinition,
    WordDetails,
)
from dictionary_backend.app.services.pexels_client import search_photos_or_empty

logger = logging.getLogger(__name__)

SEARCH_ATTEMPTS = 3
MAX_RANDOM_PAGE = 5
MAX_DEFINITION_KEYWORDS = 3

STOP_WORDS = {
    "a", "an", "the", "and", "or", "but", "if", "then", "of", "to", "in", "on",
    "at", "by", "for", "with", "from", "into", "onto", "as", "is", "are", "was",
    "were", "be", "been", "being", "it", "its", "this", "that", "these", "those",
    "which", "who", "whom", "whose", "what", "when", "where", "how", "not", "no",
    "something", "someone", "somebody", "used", "use", "using", "very", "such",
    "can", "may", "has", "have", "had", "do", "does", "did", "one", "any", "some",
    "especially", "often", "usually", "etc", "you", "your", "their", "them",
}

# part of speech 里没有视觉意义的，不拼进搜索词
SKIP_POS = {"undefined", "phrase", "sentence", "abbreviation", "suffix", "article"}

_WORD_RE = re.compile(r"[^\W\d_]+", re.UNICODE)


class ImageNotFound(LookupError):
    pass


def extract_keywords(text: str, limit: int = MAX_DEFINITION_KEYWORDS) -> List[str]:
    keywords: List[str] = []
    for token in _WORD_RE.findall((text or "").lower()):
        if len(token) < 3 or token in STOP_WORDS or token in keywords:
            continue
        keywords.append(token)
        if len(keywords) == limit:
            break
    return keywords


def build_search_query(word: str, part_of_speech: Optional[str], definition: Optional[str]) -> str:
    parts = [word]
    if part_of_speech and part_of_speech not in SKIP_POS:
        parts.append(part_of_speech.replace("_", " "))
    parts.extend(k for k in extract_keywords(definition or "") if k != word.lower())
    return " ".join(parts)


def photo_url(photo: Dict[str, Any]) -> Optional[str]:
    src = photo.get("src") or {}
    return src.get("large") or src.get("original") or src.get("medium") or photo.get("url")


class ImageService:

    def __init__(
        self,
        db: Session,
        search: Callable[..., Awaitable[dict]] = search_photos_or_empty,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.search = search
        self.rng = rng or random.Random()

    # ---------- 查询 ----------
    def get_image(self, image_id: int) -> Image:
        image = self.db.query(Image).filter(Image.id == image_id).first()
        if image is None:
            raise ImageNotFound(image_id)
        return image

    def get_definition(self, definition_id: int) -> Definition:
        definition = self.db.query(Definition).filter(Definition.id == definition_id).first()
        if definition is None:
            raise ImageNotFound(f"definition {definition_id}")
        return definition

    def get_images_by_definition(self, definition_id: int) -> List[Image]:
        definition = self.get_definition(definition_id)
        return [definition.image] if definition.image else []

    def _word_for_definition(self, definition_id: int):
        return (
            self.db.query(Word.word, WordDetails.part_of_speech)
            .join(WordDetails, WordDetails.word_id == Word.id)
            .join(WordDefinition, WordDefinition.word_details_id == WordDetails.id)
            .filter(WordDefinition.definition_id == definition_id)
            .order_by(WordDefinition.is_primary.desc())
            .first()
        )

    # ---------- 写入 ----------
    def create_from_pexels(self, photo: Dict[str, Any], definition_id: Optional[int] = None) -> Optional[Image]:
        """
        Upsert the photo into ``images`` by url and point the definition at it.
        Returns None (and writes nothing) for an unknown definition.
        """
        url = photo_url(photo)
        if not url:
            raise ValueError("Photo has no usable url")

        definition = None
        if definition_id is not None:
            definition = self.db.query(Definition).filter(Definition.id == definition_id).first()
            if definition is None:
                logger.warning("Definition %s not found, photo not stored", definition_id)
                return None

        try:
            image = self.db.query(Image).filter(Image.url == url).first()
            description = photo.get("alt") or photo.get("photographer")
            if image is None:
                image = Image(url=url, description=description)
                self.db.add(image)
                self.db.flush()
            elif description and not image.description:
                image.description = description

            if definition is not None:
                definition.image_id = image.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(image)
        return image

    def assign(self, definition_id: int, image_id: int) -> Definition:
        definition = self.get_definition(definition_id)
        image = self.get_image(image_id)
        definition.image_id = image.id
        self.db.commit()
        self.db.refresh(definition)
        return definition

    def update_metadata(self, image_id: int, description: Optional[str]) -> Image:
        image = self.get_image(image_id)
        image.description = description
        self.db.commit()
        self.db.refresh(image)
        return image

    def delete_image(self, image_id: int) -> None:
        image = self.get_image(image_id)
        # 先解除释义上的引用，再删图片
        self.db.query(Definition).filter(Definition.image_id == image.id).update(
            {Definition.image_id: None}, synchronize_session=False
        )
        self.db.delete(image)
        self.db.commit()

    def delete_word_images(self, word_id: int) -> int:
        """Detach images from the word's definitions; delete images nobody else uses."""
        definitions = (
            self.db.query(Definition)
            .join(WordDefinition, WordDefinition.definition_id == Definition.id)
            .join(WordDetails, WordDetails.id == WordDefinition.word_details_id)
            .filter(WordDetails.word_id == word_id, Definition.image_id.isnot(None))
            .all()
        )
        image_ids = {d.image_id for d in definitions}
        for d in definitions:
            d.image_id = None
        self.db.flush()

        deleted = 0
        for image_id in image_ids:
            in_use = self.db.query(Definition.id).filter(Definition.image_id == image_id).first()
            if in_use is None:
                self.db.query(Image).filter(Image.id == image_id).delete(synchronize_session=False)
                deleted += 1
        self.db.commit()
        logger.info("Removed images of word %s: %d detached, %d deleted", word_id, len(definitions), deleted)
        return deleted

    def stats(self) -> Dict[str, int]:
        total_images = self.db.query(func.count(Image.id)).scalar() or 0
        with_image = self.db.query(func.count(Definition.id)).filter(Definition.image_id.isnot(None)).scalar() or 0
        without_image = self.db.query(func.count(Definition.id)).filter(Definition.image_id.is_(None)).scalar() or 0
        since = datetime.utcnow() - timedelta(hours=24)
        recent = self.db.query(func.count(Image.id)).filter(Image.created_at >= since).scalar() or 0
        return {
            "total_images": total_images,
            "definitions_with_images": with_image,
            "definitions_without_images": without_image,
            "recently_created": recent,
        }

    # ---------- 自动配图 ----------
    async def get_or_create_definition_image(self, definition_id: int) -> Optional[Image]:
        definition = self.get_definition(definition_id)
        if definition.image is not None:
            return definition.image

        row = self._word_for_definition(definition_id)
        if row is None:
            logger.info("Definition %s is not linked to a word, skipping image search", definition_id)
            return None
        word, part_of_speech = row
        pos = part_of_speech.value if hasattr(part_of_speech, "value") else part_of_speech
        query = build_search_query(word, pos, definition.definition)

        for attempt in range(1, SEARCH_ATTEMPTS + 1):
            page = self.rng.randint(1, MAX_RANDOM_PAGE)
            result = await self.search(query, page=page, per_page=10)
            photos = result.get("photos") or []
            logger.debug("Image search %r page %d attempt %d -> %d photos", query, page, attempt, len(photos))
            if photos:
                return self.create_from_pexels(self.rng.choice(photos), definition_id)

        # 关键词组合搜不到时退回到单词本身
        result = await self.search(word, page=1, per_page=10)
        photos = result.get("photos") or []
        if photos:
            return self.create_from_pexels(photos[0], definition_id)

        logger.info("No image found for definition %s (%r)", definition_id, query)
        return None
