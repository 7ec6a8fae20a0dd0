"""Shared FastAPI dependencies - per-browser workflow controllers and theme."""

import logging
import secrets
from collections import OrderedDict
from typing import Optional

from fastapi import Request

from cv_master.gateway.client import InferenceGateway
from cv_master.workflow.controller import WorkflowController

logger = logging.getLogger("cv_master.web")

SESSION_KEY = "session_id"
THEME_KEY = "theme"
THEMES = ("light", "dark")


class SessionStore:
    """In-memory controllers keyed by the id in the signed session cookie.

    Nothing is persisted; the least recently used session is evicted once
    ``max_sessions`` is reached.
    """

    def __init__(self, gateway: InferenceGateway, max_upload_bytes: int, max_sessions: int = 500):
        self.gateway = gateway
        self.max_upload_bytes = max_upload_bytes
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, WorkflowController]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._controllers)

    def get(self, session_id: str) -> Optional[WorkflowController]:
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def create(self) -> tuple[str, WorkflowController]:
        session_id = secrets.token_urlsafe(16)
        controller = WorkflowController(
            self.gateway,
            max_upload_bytes=self.max_upload_bytes,
            session_id=session_id[:8],
        )
        self._controllers[session_id] = controller
        while len(self._controllers) > self.max_sessions:
            evicted, _ = self._controllers.popitem(last=False)
            logger.info("Evicted session %s", evicted[:8])
        return session_id, controller


def get_controller(request: Request) -> WorkflowController:
    """Return this browser's controller, creating a fresh session if needed."""
    store: SessionStore = request.app.state.sessions
    session_id = request.session.get(SESSION_KEY)
    controller = store.get(session_id) if session_id else None
    if controller is None:
        session_id, controller = store.create()
        request.session[SESSION_KEY] = session_id
    return controller


def get_theme(request: Request) -> str:
    theme = request.session.get(THEME_KEY)
    if theme in THEMES:
        return theme
    default = request.app.state.config.web.default_theme
    return default if default in THEMES else "light"


def toggle_theme(request: Request) -> str:
    theme = "dark" if get_theme(request) == "light" else "light"
    request.session[THEME_KEY] = theme
    return theme
