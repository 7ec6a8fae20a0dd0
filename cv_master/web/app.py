"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import HTMLResponse

from cv_master.config import AppConfig, load_config, validate_config
from cv_master.gateway.client import InferenceGateway, OpenAIGateway

from .dependencies import SessionStore, get_theme
from .presentation import score_band
from .workflow import router as workflow_router

APP_NAME = "CV Master ATS"

WEB_DIR = Path(__file__).parent
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

logger = logging.getLogger("cv_master.web")


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
    )
    env.filters["score_band"] = score_band
    return env


class _Templates:
    """Thin wrapper that mimics Jinja2Templates from starlette."""

    def __init__(self):
        self.env = _create_jinja_env()

    def TemplateResponse(self, name: str, context: dict, status_code: int = 200):
        template = self.env.get_template(name)

        # Inject app name and theme into every template context
        request = context.get("request")
        context.setdefault("app_name", APP_NAME)
        if request is not None and "theme" not in context:
            context["theme"] = get_theme(request)

        html = template.render(**context)
        return HTMLResponse(html, status_code=status_code)


def create_app(config: Optional[AppConfig] = None, gateway: Optional[InferenceGateway] = None) -> FastAPI:
    if config is None:
        config = load_config(None)
    if gateway is None:
        gateway = OpenAIGateway(config.gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for w in validate_config(config):
            logger.warning("Config: %s", w)
        logger.info("%s ready (model %s)", APP_NAME, config.gateway.model)
        yield
        logger.info("%s shutting down with %d active sessions", APP_NAME, len(app.state.sessions))

    app = FastAPI(title=APP_NAME, lifespan=lifespan)

    # Signed cookie carries the session id and theme preference
    app.add_middleware(SessionMiddleware, secret_key=config.web.session_secret)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.state.config = config
    app.state.templates = _Templates()
    app.state.sessions = SessionStore(
        gateway,
        max_upload_bytes=config.intake.max_upload_bytes,
        max_sessions=config.web.max_sessions,
    )

    app.include_router(workflow_router)

    return app
