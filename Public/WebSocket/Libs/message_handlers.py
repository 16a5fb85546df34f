# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                 import konsol
from pydantic            import ValidationError
from ..Models            import Connection, RoomState, IncomingMessage
from .RoomStore          import RoomStore
from .ConnectionRegistry import ConnectionRegistry
import math

# Bu farkın altındaki sync raporları yok sayılır (saat kayması / broadcast fırtınası)
DEBOUNCE_THRESHOLD = 0.5

def oynatma_zamani(mesaj: IncomingMessage) -> float | None:
    """Geçerli (sonlu, negatif olmayan) zaman ya da None"""
    if mesaj.currentTime is None or not math.isfinite(mesaj.currentTime) or mesaj.currentTime < 0:
        return None

    return float(mesaj.currentTime)

class SyncProtocolHandler:
    """Gelen mesajı odanın durumuna göre yorumla, gereken değişikliği uygula"""

    def __init__(self, store: RoomStore, registry: ConnectionRegistry):
        self.store    = store
        self.registry = registry

        self.handlers = {
            "sync"     : self.handle_sync,
            "getState" : self.handle_get_state,
            "pause"    : self.handle_pause,
            "play"     : self.handle_play,
        }

    @staticmethod
    def parse(raw: str | bytes) -> IncomingMessage | None:
        """JSON + şema kontrolü; bozuk mesaj None"""
        try:
            return IncomingMessage.model_validate_json(raw)
        except ValidationError as hata:
            konsol.log(f"[yellow]Mesaj yok sayıldı:[/] {hata.error_count()} hata » {str(raw)[:120]}")
            return None

    async def handle(self, baglanti: Connection, raw: str | bytes) -> bool:
        """Mesajı işle; bir şey uygulandıysa True"""
        mesaj = self.parse(raw)
        if not mesaj:
            return False

        # Oda / istemci mesajdan değil bağlantı etiketlerinden gelir
        room = self.store.get_room(baglanti.room_id)
        if not room:
            return False

        return await self.handlers[mesaj.type](baglanti, room, mesaj)

    # ============== Handlers ==============

    async def handle_sync(self, baglanti: Connection, room: RoomState, mesaj: IncomingMessage) -> bool:
        """SYNC: sadece anlamlı fark varsa zamanı güncelle (yayın bilgisiz)"""
        zaman = oynatma_zamani(mesaj)
        if zaman is None:
            return False

        if abs(room.current_time - zaman) <= DEBOUNCE_THRESHOLD:
            return False

        await self.store.update_room(room.room_id, current_time=zaman)
        return True

    async def handle_get_state(self, baglanti: Connection, room: RoomState, mesaj: IncomingMessage) -> bool:
        """GET_STATE: durumu sadece gönderene yolla"""
        return self.registry.send(baglanti.socket, room.to_dict())

    async def handle_pause(self, baglanti: Connection, room: RoomState, mesaj: IncomingMessage) -> bool:
        """PAUSE mesajını işle"""
        zaman = oynatma_zamani(mesaj)
        if zaman is None:
            return False

        client_name = room.client_name(baglanti.client_id)
        await self.store.update_room(
            room.room_id,
            info         = f"{client_name} paused",
            current_time = zaman,
            is_paused    = True,
        )
        return True

    async def handle_play(self, baglanti: Connection, room: RoomState, mesaj: IncomingMessage) -> bool:
        """PLAY mesajını işle"""
        zaman = oynatma_zamani(mesaj)
        if zaman is None:
            return False

        client_name = room.client_name(baglanti.client_id)
        await self.store.update_room(
            room.room_id,
            info         = f"{client_name} resumed",
            current_time = zaman,
            is_paused    = False,
        )
        return True
