# learning_backend/main.py
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from dictionary_backend.app.core.config import config

# 路由
from learning_backend.routes.auth_routes import router as auth_router
from learning_backend.routes.user_routes import router as user_router
from learning_backend.routes.session_routes import router as session_router
from learning_backend.routes.practice_routes import router as practice_router
from learning_backend.routes.settings_routes import router as settings_router
from learning_backend.routes.stats_routes import router as stats_router
from learning_backend.routes.user_dictionary_routes import router as user_dictionary_router
from learning_backend.routes.user_list_routes import router as user_list_router
from learning_backend.routes.language_routes import router as language_router
from learning_backend.routes.translation_routes import router as translation_router


def get_app():
    if not config.SECRET_KEY:
        raise ValueError("Missing essential environment variables. Check your .env file.")

    app = FastAPI(title="Vocabulary Learning API")

    # --- 中间件 ---
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.SECRET_KEY,
        session_cookie="session",
        max_age=86400,
    )

    # --- 注册路由 ---
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(user_router)
    app.include_router(session_router)
    app.include_router(practice_router)
    app.include_router(settings_router)
    app.include_router(stats_router)
    app.include_router(user_dictionary_router)
    app.include_router(user_list_router)
    app.include_router(language_router)
    app.include_router(translation_router)

    # --- 健康检查 ---
    @app.get("/")
    def read_root():
        return {
            "message": "Vocabulary Learning API is running!",
            "endpoints": {
                "docs": "/docs",
                "auth": "/auth",
                "sessions": "/sessions",
                "settings": "/settings",
            }
        }

    return app
