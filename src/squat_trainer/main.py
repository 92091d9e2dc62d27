"""Main FastAPI application."""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from squat_trainer import __version__
from squat_trainer.api.routes import router
from squat_trainer.config import settings
from squat_trainer.core import SessionConfig
from squat_trainer.services.web_page import WebViewOptions

# Web view defaults
DEFAULT_WEB_DURATION = 150
DEFAULT_WEB_COUNT = 10
DEFAULT_WEB_SETS = 2
DEFAULT_WEB_INTERVAL = 60


def create_app(
    page_config: Optional[SessionConfig] = None,
    page_options: Optional[WebViewOptions] = None,
) -> FastAPI:
    """Build the app; the page serves ``page_config`` unless the query string overrides it."""
    app = FastAPI(title="Squat Trainer", version=__version__)

    # Only needed when the page is served from another origin
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.page_config = page_config or SessionConfig.create(
        set_active_seconds=DEFAULT_WEB_DURATION,
        reps_per_set=DEFAULT_WEB_COUNT,
        hold_seconds=settings.HOLD_SECONDS,
        sets=DEFAULT_WEB_SETS,
        rest_seconds=DEFAULT_WEB_INTERVAL,
    )
    app.state.page_options = page_options or WebViewOptions(
        rest_countdown_seconds=settings.REST_COUNTDOWN_SECONDS,
    )
    app.include_router(router)
    return app


app = create_app()
