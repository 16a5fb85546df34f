# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from pydantic    import BaseModel, StrictFloat, StrictInt
from typing      import Any, Literal
import asyncio

# Bağlantı yaşam döngüsü: connecting -> open -> closed
CONNECTING = "connecting"
OPEN       = "open"
CLOSED     = "closed"

ANONYMOUS = "Anonymous"

class SyncWatchError(Exception):
    """SyncWatch temel hatası"""

class RoomNotFound(SyncWatchError):
    """Oda tabloda yok"""

    def __init__(self, room_id: str):
        super().__init__(f"Room not found: {room_id}")
        self.room_id = room_id

@dataclass
class Client:
    """Oda listesindeki izleyici"""
    id   : str
    name : str

@dataclass
class RoomState:
    """İzleme odası"""
    room_id      : str
    current_time : float        = 0.0
    is_paused    : bool         = True
    clients      : list[Client] = field(default_factory=list)

    def client_name(self, client_id: str | None) -> str:
        for client in self.clients:
            if client.id == client_id:
                return client.name
        return ANONYMOUS

    def to_dict(self) -> dict:
        """Tel / depo formatı (camelCase)"""
        return {
            "currentTime" : self.current_time,
            "isPaused"    : self.is_paused,
            "clients"     : [{"id": client.id, "name": client.name} for client in self.clients],
            "roomId"      : self.room_id,
        }

    @classmethod
    def from_dict(cls, room_id: str, veri: dict) -> "RoomState":
        return cls(
            room_id      = room_id,
            current_time = max(float(veri.get("currentTime") or 0.0), 0.0),
            is_paused    = bool(veri.get("isPaused", True)),
            clients      = [Client(id=c["id"], name=c["name"]) for c in veri.get("clients") or []],
        )

@dataclass(eq=False)
class Connection:
    """Canlı soket ve etiketleri (kalıcı değil)"""
    socket      : Any
    client_id   : str
    room_id     : str
    client_name : str           = ANONYMOUS
    state       : str           = CONNECTING
    outbox      : asyncio.Queue = field(default_factory=asyncio.Queue)

    @property
    def deliverable(self) -> bool:
        # connecting iken kuyruğa alınır, upgrade sonrası gönderilir
        return self.state != CLOSED

class IncomingMessage(BaseModel):
    """İstemciden gelen mesaj"""
    type        : Literal["sync", "getState", "pause", "play"]
    # bool / string sayı sayılmaz; aralık kontrolü zaman isteyen handler'larda
    currentTime : StrictFloat | StrictInt | None = None
