# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

KOK_DIZIN = Path(__file__).resolve().parent.parent

# .env yükleme
env_path = KOK_DIZIN / ".env"
load_dotenv(dotenv_path=env_path)

# AYAR.yml yükleme
with open(KOK_DIZIN / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

def _bool(deger) -> bool:
    return str(deger).lower() == "true"

# Genel ayarlar
PRODUCTION = _bool(os.getenv("PRODUCTION", "false"))

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Kalıcı depo (memory | file | redis)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", AYAR["STORAGE"]["BACKEND"]).lower()
STORAGE_PATH    = os.getenv("STORAGE_PATH",    AYAR["STORAGE"]["PATH"])
STORAGE_KEY     = os.getenv("STORAGE_KEY",     AYAR["STORAGE"]["KEY"])
REDIS_URL       = os.getenv("REDIS_URL",       AYAR["STORAGE"]["REDIS_URL"])

# Senkronizasyon
AWAIT_WRITES  = _bool(os.getenv("AWAIT_WRITES", AYAR["SYNC"]["AWAIT_WRITES"]))
RESTORE_GRACE = float(os.getenv("RESTORE_GRACE", AYAR["SYNC"]["RESTORE_GRACE"]))

# Ön kapı şifresi (boşsa kontrol yok)
SYNC_PASSWORD = os.getenv("SYNC_PASSWORD", "")
