# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                  import JSONResponse
from .                     import api_v1_router
from Public.WebSocket.Libs import sync_watch

@api_v1_router.get("/health")
async def health_check():
    """API sağlık kontrolü"""
    return JSONResponse({
        "success" : sync_watch.running,
        "status"  : "healthy" if sync_watch.running else "starting",
        "rooms"   : len(sync_watch.store),
    })
