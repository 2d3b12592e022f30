from __future__ import annotations

from fastapi import FastAPI

from gsi_server.api.routes import router
from gsi_server.channel import EventSender


def create_app(sender: EventSender) -> FastAPI:
    """ASGI app for one server instance; every request pushes through `sender`."""

    app = FastAPI(title="gsi-server", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.sender = sender
    app.include_router(router)
    return app
