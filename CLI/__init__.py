# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console import Console
from rich.panel   import Panel
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(temizle: bool = True):
    """Konsolu kapat ve çık"""
    if temizle:
        konsol.clear()

    konsol.print("\n[bold red]Çıkış yapılıyor...[/]\n", width=70, justify="center")
    sys.exit(0)

def hata_yakala(hata: BaseException):
    """Yakalanmamış hatayı panel içinde bas ve hata koduyla çık"""
    if isinstance(hata, KeyboardInterrupt):
        cikis_yap(False)

    konsol.print(
        Panel.fit(
            renderable   = f"[bold red]{type(hata).__name__}[/] [blue]»[/] {hata}",
            title        = "[bold red]Hata[/]",
            border_style = "red"
        )
    )
    sys.exit(1)
