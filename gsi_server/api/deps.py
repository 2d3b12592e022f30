from __future__ import annotations

from fastapi import Request

from gsi_server.channel import EventSender


def get_sender(request: Request) -> EventSender:
    return request.app.state.sender
