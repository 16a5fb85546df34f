# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import os

# Settings import edilmeden önce
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["AWAIT_WRITES"]    = "false"
os.environ["RESTORE_GRACE"]   = "60"
os.environ["SYNC_PASSWORD"]   = ""

from types import SimpleNamespace
from Libs  import MemoryStorage, StorageError
from Public.WebSocket.Libs import RoomActor
import json, pytest, pytest_asyncio


class FakeSocket:
    """Transport yerine geçen soket; etiketler `state` üzerinde durur."""

    def __init__(self, name: str = "ws"):
        self.name  = name
        self.state = SimpleNamespace()

    def __repr__(self):
        return f"FakeSocket({self.name})"


class FailingStorage(MemoryStorage):
    """Okuma çalışır, yazım her zaman hata verir."""

    async def put(self, key: str, value: dict) -> None:
        raise StorageError("disk full")


def drain(baglanti) -> list[dict]:
    """Bağlantının kuyruğundaki tüm mesajları çöz ve boşalt."""
    mesajlar = []
    while not baglanti.outbox.empty():
        mesajlar.append(json.loads(baglanti.outbox.get_nowait()))
    return mesajlar


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest_asyncio.fixture
async def actor(storage):
    aktor = RoomActor(storage=storage)
    await aktor.start()
    yield aktor
    await aktor.stop()


@pytest_asyncio.fixture
async def room_with_two(actor):
    """Alice ve Bob'un bağlı olduğu oda; kuyruklar boşaltılmış."""
    alice_ws = FakeSocket("alice")
    bob_ws   = FakeSocket("bob")

    alice = await actor.create(alice_ws, "Alice")
    bob   = await actor.join(alice.room_id, bob_ws, "Bob")

    drain(alice)
    drain(bob)
    return SimpleNamespace(room_id=alice.room_id, alice=alice, bob=bob, alice_ws=alice_ws, bob_ws=bob_ws)
