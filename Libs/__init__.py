# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Depo import StateStorage, MemoryStorage, FileStorage, RedisStorage, StorageError, storage_olustur
