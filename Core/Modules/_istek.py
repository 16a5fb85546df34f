# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import syncwatch_FastAPI, Request, JSONResponse
from time        import time
from user_agents import parse
import asyncio

# Bu yollar loglanmaz
SESSIZ_YOLLAR = ("/api/v1/health", "/favicon.ico")

def cihaz_bul(ua_header: str | None) -> str:
    if not ua_header:
        return "-"

    parsed_ua = parse(ua_header)
    return ua_header if str(parsed_ua).split("/")[2].strip() == "Other" else str(parsed_ua)

@syncwatch_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    fw_for    = request.headers.get("X-Forwarded-For")
    client_ip = fw_for.split(",")[0].strip() if fw_for else (request.client.host if request.client else "-")

    try:
        response = await asyncio.wait_for(call_next(request), timeout=30)
        kod      = response.status_code
    except asyncio.TimeoutError:
        kod      = 504
        response = JSONResponse(status_code=504, content={"ups": "Zaman Aşımı.."})
        konsol.log(f"[red]⏱️ Timeout:[/] {request.url.path}")

    if request.url.path in SESSIZ_YOLLAR:
        return response

    sure = round(time() - baslangic_zamani, 2)
    konsol.log(
        f"[bold blue]»[/] [bold turquoise2]{request.url.path}[/]"
        f"  [bold green]{request.method}[/] [blue]-[/] [bold bright_yellow]{kod}[/] [blue]-[/] [bold yellow2]{sure} sn[/]"
        f"  [bold red]{client_ip}[/] [magenta]{cihaz_bul(request.headers.get('User-Agent'))}[/]"
    )

    return response
