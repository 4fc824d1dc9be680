# server/main.py

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from api import auth, post
from config import Settings, load_settings, setup_logging
from database import create_db_engine, create_session_factory, init_db


logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    engine = create_db_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="Blog API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url] if settings.frontend_url else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("request %s %s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("error handling %s %s", request.method, request.url.path)
            raise
        logger.info(
            "response %s %s status %s",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response

    @app.get("/", response_class=PlainTextResponse)
    def hello():
        return "Hello World!"

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    app.include_router(auth.router)
    app.include_router(post.router)
    return app


def create_app_from_env() -> FastAPI:
    """
    Entry point for `uvicorn main:create_app_from_env --factory`.
    """
    settings = load_settings()
    setup_logging(settings.log_level)
    return create_app(settings)


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
