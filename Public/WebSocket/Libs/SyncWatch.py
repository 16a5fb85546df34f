# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__          import annotations
from CLI                 import konsol
from typing              import Any, Awaitable, Callable
from Libs                import StateStorage, MemoryStorage
from ..Models            import Client, Connection, RoomState, RoomNotFound
from .RoomStore          import RoomStore
from .ConnectionRegistry import ConnectionRegistry
from .message_handlers   import SyncProtocolHandler
import asyncio

# Gönderimi bu sürede bitmeyen soket kapanmış sayılır
EVENT_TIMEOUT = 1.0

class RoomActor:
    """
    Tüm odalar için tek seri bağlam.
    Bağlantı açma, mesaj ve kapanma olayları tek kuyruktan, geliş sırasıyla,
    tek worker tarafından işlenir; oda tablosu sadece burada değişir.
    """

    def __init__(
        self,
        storage       : StateStorage | None = None,
        storage_key   : str   = "SyncWatch:rooms",
        await_writes  : bool  = False,
        restore_grace : float = 60.0,
    ):
        self.configure(storage or MemoryStorage(), storage_key, await_writes, restore_grace)
        self._kuyruk: asyncio.Queue = asyncio.Queue()
        self._worker: asyncio.Task | None = None
        self._supurge: asyncio.Task | None = None

    def configure(self, storage: StateStorage, storage_key: str, await_writes: bool, restore_grace: float):
        """Depoyu ve politikaları ayarla (start'tan önce)"""
        self.storage       = storage
        self.restore_grace = restore_grace
        self.registry      = ConnectionRegistry()
        self.store         = RoomStore(storage, storage_key, await_writes, on_change=self._yayinla)
        self.protocol      = SyncProtocolHandler(self.store, self.registry)

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    # ============== Yaşam Döngüsü ==============

    async def start(self):
        """Tabloyu yükle, sonra worker'ı başlat (yükleme bitene kadar olaylar kuyrukta bekler)"""
        if self.running:
            return

        yuklenen = await self.store.load()
        if yuklenen:
            await self.store.reset_sessions()

        self._worker = asyncio.create_task(self._calis())

        if yuklenen:
            self._supurge = asyncio.create_task(self._bos_odalari_sonra_sil(self.restore_grace))

        konsol.log(f"[green]SyncWatch aktörü başladı[/] [blue]»[/] {yuklenen} oda yüklendi")

    async def stop(self):
        """Worker'ı durdur, bekleyen yazımları bitir, depoyu kapat"""
        for task in (self._supurge, self._worker):
            if task and not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        self._supurge = None
        self._worker  = None

        # Sırası hiç gelmeyen olayların bekleyenleri asılı kalmasın
        while not self._kuyruk.empty():
            _, sonuc = self._kuyruk.get_nowait()
            sonuc.cancel()

        await self.store.flush()
        await self.storage.close()

    async def _bos_odalari_sonra_sil(self, gecikme: float):
        await asyncio.sleep(gecikme)
        silinen = await self.sweep()
        if silinen:
            konsol.log(f"[yellow]Bağlantısız odalar silindi:[/] {', '.join(silinen)}")

    # ============== Seri Bağlam ==============

    async def _calis(self):
        while True:
            islem, sonuc = await self._kuyruk.get()
            try:
                # Çağıran vazgeçtiyse olay hiç uygulanmaz
                if sonuc.cancelled():
                    continue

                deger = await islem()
            except Exception as hata:
                if sonuc.done():
                    konsol.log(f"[red]Olay hatası:[/] {type(hata).__name__} » {hata}")
                else:
                    sonuc.set_exception(hata)
            else:
                if not sonuc.done():
                    sonuc.set_result(deger)
            finally:
                self._kuyruk.task_done()

    async def _sirala(self, islem: Callable[[], Awaitable[Any]]) -> Any:
        """İşlemi kuyruğa koy ve sırası gelip bitince sonucu döndür"""
        sonuc = asyncio.get_running_loop().create_future()
        self._kuyruk.put_nowait((islem, sonuc))
        return await sonuc

    def _yayinla(self, room: RoomState, info: str | None):
        payload = room.to_dict()
        if info:
            payload["info"] = info

        self.registry.broadcast(room.room_id, payload)

    # ============== Olaylar ==============

    async def create(self, socket: Any, client_name: str) -> Connection:
        """Yeni oda aç ve soketi içine al"""
        try:
            return await self._sirala(lambda: self._olustur(socket, client_name))
        except asyncio.CancelledError:
            self._vazgec(socket)
            raise

    async def join(self, room_id: str, socket: Any, client_name: str) -> Connection:
        """Var olan odaya katıl; oda yoksa RoomNotFound"""
        try:
            return await self._sirala(lambda: self._katil(room_id, socket, client_name))
        except asyncio.CancelledError:
            self._vazgec(socket)
            raise

    def _vazgec(self, socket: Any):
        # Katılım işlenirken iptal edildiyse soketi kapatacak kimse yok: kapanışı kuyruğa ekle
        sonuc = asyncio.get_running_loop().create_future()
        sonuc.add_done_callback(lambda f: f.cancelled() or f.exception())
        self._kuyruk.put_nowait((lambda: self._kapat(socket), sonuc))

    async def message(self, socket: Any, raw: str | bytes) -> bool:
        """Mesajı seri bağlamda işle; hata diğer odaları etkilemez"""
        try:
            return await self._sirala(lambda: self._mesaj(socket, raw))
        except Exception as hata:
            konsol.log(f"[red]Mesaj işlenemedi:[/] {type(hata).__name__} » {hata}")
            return False

    async def close(self, socket: Any) -> None:
        """Kapanan soketi odadan düşür"""
        try:
            await self._sirala(lambda: self._kapat(socket))
        except Exception as hata:
            konsol.log(f"[red]Bağlantı kapanışı işlenemedi:[/] {type(hata).__name__} » {hata}")

    async def sweep(self) -> list[str]:
        """Hiç bağlantısı olmayan odaları sil"""
        return await self._sirala(self._supur)

    async def _olustur(self, socket: Any, client_name: str) -> Connection:
        room_id = await self.store.create_room()
        try:
            return await self._katil(room_id, socket, client_name)
        except Exception:
            await self.store.delete_room(room_id)
            raise

    async def _katil(self, room_id: str, socket: Any, client_name: str) -> Connection:
        room = self.store.get_room(room_id)
        if not room:
            raise RoomNotFound(room_id)

        baglanti = self.registry.admit(socket, room_id, client_name)
        try:
            await self.store.update_room(
                room_id,
                info    = f"{client_name} connected",
                clients = [*room.clients, Client(id=baglanti.client_id, name=client_name)],
            )
        except Exception:
            self.registry.remove(socket)
            raise

        konsol.log(f"[green]+[/] [bold]{client_name}[/] [blue]»[/] {room_id} ({baglanti.client_id})")
        return baglanti

    async def _mesaj(self, socket: Any, raw: str | bytes) -> bool:
        baglanti = self.registry.lookup(socket)
        if not baglanti:
            return False

        return await self.protocol.handle(baglanti, raw)

    async def _kapat(self, socket: Any) -> None:
        baglanti = self.registry.lookup(socket)
        if not baglanti:
            return

        self.registry.remove(socket)

        room = self.store.get_room(baglanti.room_id)
        if not room:
            return

        # Son bağlantıydı: oda tamamen silinir
        if not self.registry.sockets_in_room(room.room_id):
            await self.store.delete_room(room.room_id)
            konsol.log(f"[yellow]Oda boşaldı, silindi:[/] {room.room_id} [blue]«[/] [bold]{baglanti.client_name}[/]")
            return

        client_name = room.client_name(baglanti.client_id)
        await self.store.update_room(
            room.room_id,
            info      = f"{client_name} disconnected",
            is_paused = True,
            clients   = [client for client in room.clients if client.id != baglanti.client_id],
        )
        konsol.log(f"[red]-[/] [bold]{client_name}[/] [blue]»[/] {room.room_id}")

    async def _supur(self) -> list[str]:
        silinen = []
        for room_id in list(self.store.rooms):
            if not self.registry.sockets_in_room(room_id):
                await self.store.delete_room(room_id)
                silinen.append(room_id)

        return silinen


# Singleton instance
sync_watch = RoomActor()
