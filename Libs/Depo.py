# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__ import annotations
from abc        import ABC, abstractmethod
from pathlib    import Path
import redis.asyncio as aioredis
import redis, asyncio, json, os

class StorageError(Exception):
    """Kalıcı depoya erişilemedi"""

class StateStorage(ABC):
    """
    Oda tablosu için anahtar-değer deposu.
    Değerler JSON'a çevrilebilir dict olarak alınır ve tek parça yazılır.
    """

    @abstractmethod
    async def get(self, key: str) -> dict | None:
        ...

    @abstractmethod
    async def put(self, key: str, value: dict) -> None:
        ...

    async def close(self) -> None:
        return None

class MemoryStorage(StateStorage):
    """Süreç içi depo (test ve geliştirme)"""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> dict | None:
        raw = self.data.get(key)
        return json.loads(raw) if raw is not None else None

    async def put(self, key: str, value: dict) -> None:
        self.data[key] = json.dumps(value, ensure_ascii=False)

class FileStorage(StateStorage):
    """JSON dosyası; her anahtar dosyada ayrı bir alan"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _oku(self) -> dict:
        if not self.path.exists():
            return {}

        with open(self.path, "r", encoding="utf-8") as dosya:
            return json.load(dosya)

    def _yaz(self, key: str, value: dict):
        icerik      = self._oku()
        icerik[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        gecici = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(gecici, "w", encoding="utf-8") as dosya:
            json.dump(icerik, dosya, ensure_ascii=False)

        # Yarım yazılmış dosya bırakma
        os.replace(gecici, self.path)

    async def get(self, key: str) -> dict | None:
        try:
            return (await asyncio.to_thread(self._oku)).get(key)
        except (OSError, ValueError) as hata:
            raise StorageError(f"{self.path} okunamadı: {hata}") from hata

    async def put(self, key: str, value: dict) -> None:
        try:
            await asyncio.to_thread(self._yaz, key, value)
        except (OSError, TypeError, ValueError) as hata:
            raise StorageError(f"{self.path} yazılamadı: {hata}") from hata

class RedisStorage(StateStorage):
    """Redis string anahtarı; tablo JSON olarak saklanır"""

    def __init__(self, url: str):
        self.url    = url
        self.client = aioredis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> dict | None:
        try:
            raw = await self.client.get(key)
        except redis.RedisError as hata:
            raise StorageError(f"Redis okunamadı ({self.url}): {hata}") from hata

        return json.loads(raw) if raw else None

    async def put(self, key: str, value: dict) -> None:
        try:
            await self.client.set(key, json.dumps(value, ensure_ascii=False))
        except redis.RedisError as hata:
            raise StorageError(f"Redis yazılamadı ({self.url}): {hata}") from hata

    async def close(self) -> None:
        await self.client.aclose()

def storage_olustur(backend: str, path: str = "", redis_url: str = "") -> StateStorage:
    """Ayardaki isme göre depo üret"""
    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(path)
    if backend == "redis":
        return RedisStorage(redis_url)

    raise ValueError(f"Bilinmeyen depo türü: {backend}")
