# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Libs                  import storage_olustur
from Public.WebSocket.Libs import sync_watch
from Settings              import STORAGE_BACKEND, STORAGE_PATH, STORAGE_KEY, REDIS_URL, AWAIT_WRITES, RESTORE_GRACE

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    # ! Oda tablosu yüklenmeden hiçbir bağlantı olayı işlenmez
    sync_watch.configure(
        storage       = storage_olustur(STORAGE_BACKEND, path=STORAGE_PATH, redis_url=REDIS_URL),
        storage_key   = STORAGE_KEY,
        await_writes  = AWAIT_WRITES,
        restore_grace = RESTORE_GRACE,
    )
    await sync_watch.start()
    konsol.log(f"[green]Depo:[/] {STORAGE_BACKEND} [blue]|[/] [green]await_writes:[/] {AWAIT_WRITES}")

    yield

    await sync_watch.stop()
    konsol.log("[yellow]SyncWatch aktörü durduruldu[/]")
