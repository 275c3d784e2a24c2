#dictionary_backend/app/main.py

from fastapi import FastAPI

from dictionary_backend.app.api import cleanup, dictionary, dictionary_admin, images
from dictionary_backend.app.utils.db_errors import register_db_error_handlers


def get_app():
    app = FastAPI(title="Dictionary API")

    app.include_router(dictionary.router, prefix="/dictionary", tags=["Dictionary"])
    app.include_router(dictionary_admin.router, prefix="/admin", tags=["Dictionary Admin"])
    app.include_router(images.router, prefix="/images", tags=["Images"])
    app.include_router(cleanup.router, prefix="/admin/cleanup", tags=["Cleanup"])

    register_db_error_handlers(app)

    @app.get("/")
    def health_check():
        return {"status": "running"}

    return app
