# run_main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

# fastapi-cache2
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
import redis.asyncio as aioredis

from dictionary_backend.app.core.config import config
from dictionary_backend.app.core.database import init_db
from dictionary_backend.app.services.cleanup_service import CleanupService

# 分别导入两个子项目的 get_app（仅用于拿到路由/异常处理器）
from dictionary_backend.app.main import get_app as get_dictionary_app
from learning_backend.main import get_app as get_learning_app

logger = logging.getLogger("run_main")


def create_unified_app() -> FastAPI:
    if not config.SECRET_KEY:
        raise RuntimeError("Missing SECRET_KEY in .env")

    # 1) 先各自生成子 app（注意：不会触发它们的 startup）
    dictionary_app = get_dictionary_app()
    learning_app = get_learning_app()

    # 2) 创建总 app & 中间件
    app = FastAPI(title="Vocabulary Unified API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.SECRET_KEY,
        session_cookie="session",
        max_age=86400,
    )

    # 3) 统一初始化数据库表、fastapi-cache2 和定时清理（总入口负责）
    @app.on_event("startup")
    async def _init_services():
        init_db()

        try:
            r = aioredis.from_url(config.REDIS_URL, encoding="utf8", decode_responses=True)
            await r.ping()
            FastAPICache.init(RedisBackend(r), prefix="fastapi-cache")
            logger.info("[run_main] fastapi-cache initialized with Redis: %s", config.REDIS_URL)
        except Exception as e:
            FastAPICache.init(InMemoryBackend(), prefix="fastapi-cache")
            logger.warning("[run_main] Redis init failed (%s), fallback to InMemory cache.", e)

        CleanupService.get_instance().initialize(
            enable_audio_cleanup=config.AUDIO_CLEANUP_ENABLED,
            interval_seconds=config.AUDIO_CLEANUP_INTERVAL_SECONDS,
        )

    # 4) 关闭后台任务
    @app.on_event("shutdown")
    async def _close_services():
        await CleanupService.get_instance().shutdown()
        logger.info("[run_main] cleanup scheduler stopped")

    # 5) 合并路由（把两个子 app 的 routes 挂到总 app 上）
    for route in dictionary_app.router.routes:
        if getattr(route, "path", None) == "/":
            continue
        app.router.routes.append(route)
    for route in learning_app.router.routes:
        if getattr(route, "path", None) == "/":
            continue
        app.router.routes.append(route)

    # 合并过来的路由解析依赖时仍然查子 app 的 dependency_overrides，这里共用同一个 dict
    dictionary_app.dependency_overrides = app.dependency_overrides
    learning_app.dependency_overrides = app.dependency_overrides

    # 6) 合并异常处理器（顺序：先 dictionary，再 learning）
    for key, handler in dictionary_app.exception_handlers.items():
        app.add_exception_handler(key, handler)
    for key, handler in learning_app.exception_handlers.items():
        app.add_exception_handler(key, handler)

    # 7) 统一的请求体验证错误处理：按 400 返回
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # 8) 健康检查
    @app.get("/")
    def health_check():
        return {"status": "Unified backend running!"}

    return app


app = create_unified_app()
