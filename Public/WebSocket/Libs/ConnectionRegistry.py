# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing   import Any
from ..Models import Connection, ANONYMOUS, OPEN, CLOSED
import json, uuid

class ConnectionRegistry:
    """
    Canlı soketlerin oda / istemci etiketleri.
    İki indeks birlikte tutulur: oda -> bağlantılar ve soket -> bağlantı.
    Gönderimler bağlantının kuyruğuna yazılır, asıl soket yazımı pompa görevindedir.
    """

    def __init__(self):
        self._odalar: dict[str, dict[Any, Connection]] = {}
        self._soketler: dict[Any, Connection]          = {}

    def __len__(self) -> int:
        return len(self._soketler)

    def _yeni_client_id(self, room_id: str) -> str:
        mevcut = {baglanti.client_id for baglanti in self._odalar.get(room_id, {}).values()}
        while True:
            client_id = str(uuid.uuid4())[:8]
            if client_id not in mevcut:
                return client_id

    def admit(self, socket: Any, room_id: str, client_name: str = ANONYMOUS) -> Connection:
        """Soketi kaydet ve etiketle"""
        baglanti = Connection(
            socket      = socket,
            client_id   = self._yeni_client_id(room_id),
            room_id     = room_id,
            client_name = client_name,
        )

        self._odalar.setdefault(room_id, {})[socket] = baglanti
        self._soketler[socket] = baglanti

        # Etiketler transport üzerinde de dursun (hafızadan düşerse geri kurulur)
        state = getattr(socket, "state", None)
        if state is not None:
            state.client_id   = baglanti.client_id
            state.room_id     = room_id
            state.client_name = client_name
            state.outbox      = baglanti.outbox

        return baglanti

    def lookup(self, socket: Any) -> Connection | None:
        """Soketin kaydını getir; hafızada yoksa transport etiketlerinden yeniden kur"""
        baglanti = self._soketler.get(socket)
        if baglanti:
            return baglanti

        state     = getattr(socket, "state", None)
        client_id = getattr(state, "client_id", None)
        room_id   = getattr(state, "room_id", None)
        if not client_id or not room_id:
            return None

        # Gölge düşmüşse bağlantı zaten açılmıştı; gönderim kuyruğu da transport'ta
        baglanti = Connection(
            socket      = socket,
            client_id   = client_id,
            room_id     = room_id,
            client_name = getattr(state, "client_name", None) or ANONYMOUS,
            state       = OPEN,
        )
        outbox = getattr(state, "outbox", None)
        if outbox is not None:
            baglanti.outbox = outbox

        self._odalar.setdefault(room_id, {})[socket] = baglanti
        self._soketler[socket] = baglanti
        return baglanti

    def forget(self, socket: Any) -> None:
        """Sadece hafızadaki gölgeyi düşür (transport etiketleri kalır)"""
        baglanti = self._soketler.pop(socket, None)
        if baglanti:
            self._odadan_cikar(baglanti)

    def remove(self, socket: Any) -> Connection | None:
        """Kapanan soketi kayıttan sil"""
        baglanti = self._soketler.pop(socket, None)
        if not baglanti:
            return None

        baglanti.state = CLOSED
        self._odadan_cikar(baglanti)

        # Kapanan soket bir daha geri kurulmasın
        state = getattr(socket, "state", None)
        if state is not None:
            state.client_id = None
            state.room_id   = None

        return baglanti

    def _odadan_cikar(self, baglanti: Connection):
        oda = self._odalar.get(baglanti.room_id)
        if oda is None:
            return

        oda.pop(baglanti.socket, None)
        if not oda:
            del self._odalar[baglanti.room_id]

    def sockets_in_room(self, room_id: str) -> list:
        return list(self._odalar.get(room_id, {}).keys())

    def connections_in_room(self, room_id: str) -> list[Connection]:
        return list(self._odalar.get(room_id, {}).values())

    def _kuyruga_yaz(self, baglanti: Connection, payload: dict):
        mesaj = json.dumps({**payload, "currentClient": baglanti.client_id}, ensure_ascii=False)
        baglanti.outbox.put_nowait(mesaj)

    def send(self, socket: Any, payload: dict) -> bool:
        """Tek sokete gönder"""
        baglanti = self._soketler.get(socket)
        if not baglanti or not baglanti.deliverable:
            return False

        self._kuyruga_yaz(baglanti, payload)
        return True

    def broadcast(self, room_id: str, payload: dict) -> int:
        """Odadaki tüm açık soketlere gönder; her alıcı kendi currentClient'ını görür"""
        gonderilen = 0
        for baglanti in self.connections_in_room(room_id):
            if not baglanti.deliverable:
                continue

            self._kuyruga_yaz(baglanti, payload)
            gonderilen += 1

        return gonderilen
