# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SyncWatchModels import (
    CONNECTING, OPEN, CLOSED, ANONYMOUS,
    SyncWatchError, RoomNotFound,
    Client, RoomState, Connection, IncomingMessage
)
