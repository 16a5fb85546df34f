# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from fastapi           import WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse
from .                 import wss_router
from ..Libs            import sync_watch, EVENT_TIMEOUT
from ..Models          import Connection, RoomNotFound, ANONYMOUS, OPEN, CLOSED
from Libs              import StorageError
from Settings          import SYNC_PASSWORD
import asyncio, secrets

MAX_PAYLOAD = 64 * 1024  # 64 KB

async def reddet(websocket: WebSocket, status_code: int, mesaj: str):
    """Upgrade'den önce HTTP hatası dön"""
    try:
        await websocket.send_denial_response(PlainTextResponse(mesaj, status_code=status_code))
    except RuntimeError:
        # Sunucu denial response desteklemiyor
        await websocket.close(code=4000 + status_code, reason=mesaj)

async def yetkili(websocket: WebSocket, password: str | None) -> bool:
    if not SYNC_PASSWORD:
        return True

    if password and secrets.compare_digest(password.encode(), SYNC_PASSWORD.encode()):
        return True

    await reddet(websocket, 401, "Unauthorized")
    return False

async def pompa(websocket: WebSocket, baglanti: Connection):
    """Kuyruktaki mesajları sırayla sokete yaz"""
    while True:
        mesaj = await baglanti.outbox.get()
        try:
            await asyncio.wait_for(websocket.send_text(mesaj), timeout=EVENT_TIMEOUT)
        except asyncio.TimeoutError:
            konsol.log(f"[yellow]⏱️ Gönderim zaman aşımı, bağlantı kapatılıyor:[/] [bold]{baglanti.client_name}[/] [blue]»[/] {baglanti.room_id} ({baglanti.client_id})")
            baglanti.state = CLOSED
            return
        except (WebSocketDisconnect, RuntimeError):
            baglanti.state = CLOSED
            return

async def dinle(websocket: WebSocket):
    """Gelen mesajları aktöre ilet"""
    while True:
        mesaj = await websocket.receive()
        if mesaj["type"] == "websocket.disconnect":
            return

        raw = mesaj.get("text") or mesaj.get("bytes")
        if not raw:
            continue

        boyut = len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)
        if boyut > MAX_PAYLOAD:
            konsol.log(f"[yellow]Mesaj boyutu çok büyük, yok sayıldı:[/] {boyut} bayt")
            continue

        await sync_watch.message(websocket, raw)

async def oturum(websocket: WebSocket, baglanti: Connection):
    """Upgrade'i tamamla, bağlantı kapanana kadar gönder / al"""
    gorevler: set[asyncio.Task] = set()
    try:
        await websocket.accept()
        baglanti.state = OPEN

        gorevler = {
            asyncio.create_task(pompa(websocket, baglanti)),
            asyncio.create_task(dinle(websocket)),
        }
        await asyncio.wait(gorevler, return_when=asyncio.FIRST_COMPLETED)
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        for task in gorevler:
            task.cancel()

        await sync_watch.close(websocket)

@wss_router.websocket("/create")
async def create_room(websocket: WebSocket, clientName: str = ANONYMOUS, password: str | None = None):
    """Yeni oda aç ve içine katıl"""
    if not await yetkili(websocket, password):
        return

    try:
        baglanti = await sync_watch.create(websocket, clientName or ANONYMOUS)
    except StorageError as hata:
        konsol.log(f"[red]Oda oluşturulamadı:[/] {hata}")
        return await reddet(websocket, 503, "Storage unavailable")

    await oturum(websocket, baglanti)

@wss_router.websocket("/sync")
async def join_room(websocket: WebSocket, room: str | None = None, clientName: str = ANONYMOUS, password: str | None = None):
    """Var olan odaya katıl"""
    if not await yetkili(websocket, password):
        return

    if not room:
        konsol.log("[yellow]Oda belirtilmeden sync isteği[/]")
        return await reddet(websocket, 400, "Room not specified")

    try:
        baglanti = await sync_watch.join(room.strip().upper(), websocket, clientName or ANONYMOUS)
    except RoomNotFound:
        return await reddet(websocket, 404, "Room not found")
    except StorageError as hata:
        konsol.log(f"[red]Odaya katılınamadı:[/] {hata}")
        return await reddet(websocket, 503, "Storage unavailable")

    await oturum(websocket, baglanti)
