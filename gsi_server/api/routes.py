from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from gsi_server.api.deps import get_sender
from gsi_server.api.models import Event
from gsi_server.channel import EventSender
from gsi_server.errors import ChannelClosedError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/")
async def handle_update(body: Event, sender: EventSender = Depends(get_sender)) -> JSONResponse:
    """Hand one game update to the dispatch loop and echo it back.

    200 when queued; 500 (same body) when the dispatch loop is gone.
    """

    try:
        sender.push(body.clone())
    except ChannelClosedError as e:
        logger.error("Failed to hand event to the dispatch loop: %s", e)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.to_wire())

    return JSONResponse(status_code=status.HTTP_200_OK, content=body.to_wire())
