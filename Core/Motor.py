# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from Settings import PROJE, HOST, PORT, STORAGE_BACKEND, PRODUCTION
from sys      import version_info
import uvicorn

def sunucu_ayarlari() -> dict:
    """uvicorn parametreleri; geliştirmede uvicorn kendi loglarını da basar"""
    return {
        "host"                : HOST,
        "port"                : PORT,
        "proxy_headers"       : True,
        "forwarded_allow_ips" : "*",
        # Tek seri otorite: oda tablosu süreç içinde, birden fazla worker olamaz
        "workers"             : 1,
        "log_level"           : "error" if PRODUCTION else "info",
    }

def basla():
    surum = f"{version_info[0]}.{version_info[1]}"
    konsol.print(f"\n[bold gold1]{PROJE}[/] [yellow]:tv:[/] [turquoise2]Python {surum}[/] [bold yellow2]uvicorn[/]", width=70, justify="center")
    konsol.print(f"[red]{HOST}[light_coral]:[/]{PORT}[pale_green1] başlatılmıştır...[/] [blue]({STORAGE_BACKEND})[/]\n", width=70, justify="center")

    uvicorn.run("Core:syncwatch_FastAPI", **sunucu_ayarlari())
