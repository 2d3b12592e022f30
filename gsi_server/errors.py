from __future__ import annotations


class GSIError(Exception):
    """Base class for errors raised by gsi_server."""


class InstallError(GSIError):
    """The game's config artifact could not be located or written."""


class SteamNotFoundError(InstallError):
    pass


class GameNotFoundError(InstallError):
    pass


class ChannelClosedError(GSIError):
    """The consuming end of the event channel is gone."""
