"""Receive game-state integration updates over HTTP and fan them out to listeners.

The pipeline is: POST / -> event channel -> dispatch loop -> listeners.
"""

from gsi_server.api.models import Event
from gsi_server.channel import EventReceiver, EventSender, event_channel
from gsi_server.config import GSIConfig, Subscription
from gsi_server.dispatch import Dispatcher
from gsi_server.errors import ChannelClosedError, GameNotFoundError, GSIError, InstallError, SteamNotFoundError
from gsi_server.server import GSIServer, ServerHandle

__all__ = [
    "ChannelClosedError",
    "Dispatcher",
    "Event",
    "EventReceiver",
    "EventSender",
    "GSIConfig",
    "GSIError",
    "GSIServer",
    "GameNotFoundError",
    "InstallError",
    "ServerHandle",
    "SteamNotFoundError",
    "Subscription",
    "event_channel",
]
