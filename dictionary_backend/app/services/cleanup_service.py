# dictionary_backend/app/services/cleanup_service.py
"""
数据库清理：删除不再被任何关联表引用的 audio 记录。

CleanupService 是进程内单例，应用启动时 initialize() 一次，
之后按固定间隔在默认线程池里跑同步的清理函数。
"""
import asyncio
import logging
from functools import partial
from typing import Callable, Dict, List, Optional

from sqlalchemy import select, union
from sqlalchemy.orm import Session

from dictionary_backend.app.core.config import config
from dictionary_backend.app.core.database import SessionLocal
from dictionary_backend.app.models import (
    Audio,
    DefinitionAudio,
    ExampleAudio,
    WordDetailsAudio,
)

logger = logging.getLogger(__name__)


def get_orphaned_audio_ids(db: Session) -> List[int]:
    referenced = union(
        select(WordDetailsAudio.audio_id),
        select(DefinitionAudio.audio_id),
        select(ExampleAudio.audio_id),
    )
    rows = db.execute(
        select(Audio.id).where(Audio.id.notin_(select(referenced.subquery().c.audio_id))).order_by(Audio.id)
    ).all()
    return [row[0] for row in rows]


def delete_orphaned_audio(db: Session, audio_ids: List[int]) -> int:
    if not audio_ids:
        return 0
    deleted = (
        db.query(Audio)
        .filter(Audio.id.in_(audio_ids))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def cleanup_audio(db: Optional[Session] = None) -> int:
    """Delete every orphaned audio row and return how many were removed."""
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        ids = get_orphaned_audio_ids(db)
        deleted = delete_orphaned_audio(db, ids)
        logger.info("Audio cleanup removed %d orphaned records", deleted)
        return deleted
    finally:
        if own_session:
            db.close()


class CleanupService:
    _instance: Optional["CleanupService"] = None

    def __init__(self, audio_cleanup: Callable[..., int] = cleanup_audio):
        self._audio_cleanup = audio_cleanup
        self._initialized = False
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def get_instance(cls) -> "CleanupService":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(
        self,
        enable_audio_cleanup: bool = True,
        interval_seconds: Optional[float] = None,
    ) -> bool:
        """
        Schedule the periodic cleanup on the running event loop. A second
        call only logs a warning. Returns whether this call did the setup.
        """
        if self._initialized:
            logger.warning("CleanupService is already initialized")
            return False

        interval = interval_seconds or config.AUDIO_CLEANUP_INTERVAL_SECONDS
        if enable_audio_cleanup:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._audio_loop(interval))
            logger.info("Scheduled audio cleanup every %.1f hours", interval / 3600)

        self._initialized = True
        return True

    async def _audio_loop(self, interval: float):
        loop = asyncio.get_running_loop()
        while True:
            try:
                await loop.run_in_executor(None, partial(self._audio_cleanup))
            except Exception as e:
                logger.error("Scheduled audio cleanup failed: %s", e, exc_info=True)
            await asyncio.sleep(interval)

    async def shutdown(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._initialized = False

    def run_audio_cleanup(self, db: Optional[Session] = None) -> int:
        return self._audio_cleanup(db)

    def run_all(self, db: Optional[Session] = None) -> Dict[str, int]:
        logger.info("Starting all cleanup tasks...")
        results = {"audio": self.run_audio_cleanup(db)}
        logger.info("All cleanup tasks completed: %s", results)
        return results
