# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__  import annotations
from CLI         import konsol
from dataclasses import replace
from typing      import Callable
from Libs        import StateStorage, StorageError
from ..Models    import RoomState, RoomNotFound
import asyncio, random, string

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH   = 4

class RoomStore:
    """
    Oda tablosu (room_id -> RoomState).
    Her değişiklikte tablonun tamamı depoya yazılır, ardından yayın tetiklenir.
    Sadece aktörün seri bağlamından çağrılmalı.
    """

    def __init__(
        self,
        storage      : StateStorage,
        storage_key  : str = "SyncWatch:rooms",
        await_writes : bool = False,
        on_change    : Callable[[RoomState, str | None], None] | None = None,
    ):
        self.storage      = storage
        self.storage_key  = storage_key
        self.await_writes = await_writes
        self.on_change    = on_change
        self.rooms: dict[str, RoomState] = {}
        self._son_yazim: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self.rooms

    async def load(self) -> int:
        """Soğuk başlangıçta tabloyu depodan oku"""
        kayit = await self.storage.get(self.storage_key) or {}
        self.rooms = {
            room_id: RoomState.from_dict(room_id, veri)
                for room_id, veri in kayit.items()
        }
        return len(self.rooms)

    async def reset_sessions(self) -> None:
        """Restart sonrası: bağlantılar yok, eski kimlikler geri gelmez; listeyi boşalt ve durdur"""
        self.rooms = {
            room_id: RoomState(room_id=room_id, current_time=room.current_time)
                for room_id, room in self.rooms.items()
        }
        await self.persist()

    def snapshot(self) -> dict:
        return {room_id: room.to_dict() for room_id, room in self.rooms.items()}

    # ============== Kalıcılık ==============

    async def _yaz(self, onceki: asyncio.Task | None, kayit: dict):
        # Yazımlar değişiklik sırasıyla iner
        if onceki is not None:
            await asyncio.gather(onceki, return_exceptions=True)

        await self.storage.put(self.storage_key, kayit)

    @staticmethod
    def _yazim_sonucu(task: asyncio.Task):
        if task.cancelled():
            return

        exc = task.exception()
        if exc:
            konsol.log(f"[red]Oda tablosu kalıcı yazılamadı:[/] {exc}")

    async def persist(self) -> None:
        """Tabloyu depoya yaz; await_writes kapalıysa bitmesini bekleme"""
        task = asyncio.create_task(self._yaz(self._son_yazim, self.snapshot()))
        self._son_yazim = task

        if self.await_writes:
            await task
        else:
            task.add_done_callback(self._yazim_sonucu)

    async def _kaydet(self, geri_al: Callable[[], None]):
        # await_writes açıkken yazılamayan değişiklik hafızada da kalmaz
        try:
            await self.persist()
        except StorageError:
            geri_al()
            raise

    async def flush(self) -> None:
        """Bekleyen yazımları bitir (kapanışta)"""
        if self._son_yazim is not None:
            await asyncio.gather(self._son_yazim, return_exceptions=True)

    # ============== İşlemler ==============

    def _yeni_kod(self) -> str:
        while True:
            kod = "".join(random.choices(ROOM_CODE_ALPHABET, k=ROOM_CODE_LENGTH))
            if kod not in self.rooms:
                return kod

    async def create_room(self) -> str:
        """Yeni oda aç ve kodunu döndür"""
        room_id = self._yeni_kod()
        self.rooms[room_id] = RoomState(room_id=room_id)
        await self._kaydet(lambda: self.rooms.pop(room_id, None))
        return room_id

    def get_room(self, room_id: str) -> RoomState | None:
        return self.rooms.get(room_id)

    async def update_room(self, room_id: str, info: str | None = None, **alanlar) -> RoomState:
        """Alanları odaya birleştir, yaz ve yayınla"""
        room = self.rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)

        room = replace(room, **alanlar)
        if room.current_time < 0:
            raise ValueError(f"current_time negatif olamaz: {room.current_time}")

        onceki = self.rooms[room_id]
        self.rooms[room_id] = room
        await self._kaydet(lambda: self.rooms.__setitem__(room_id, onceki))

        if self.on_change:
            self.on_change(room, info)

        return room

    async def delete_room(self, room_id: str) -> bool:
        """Odayı sil ve yaz (yayın yok, alıcı kalmadı)"""
        room = self.rooms.pop(room_id, None)
        if room is None:
            return False

        await self._kaydet(lambda: self.rooms.__setitem__(room_id, room))
        return True
