from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .errors import register_exception_handlers
from .logging_config import setup_logging
from .middleware.request_log import register_request_logging
from .routers import people, root
from .store import PersonStore, create_store


def create_app(store: Optional[PersonStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="People API")
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Location"],
        )
    register_request_logging(app)
    register_exception_handlers(app)

    app.include_router(root.router)
    app.include_router(people.router)
    return app


app = create_app()
