# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

# .env yükleme
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# AYAR.yml yükleme
ayar_path = Path(__file__).resolve().parent.parent / "AYAR.yml"
with open(ayar_path, "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = os.getenv("HOST", AYAR["APP"]["HOST"])
PORT  = int(os.getenv("PORT", AYAR["APP"]["PORT"]))

# Yükleme
UPLOAD_DIR    = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_PREFIX = "current_movie"

# WebSocket flood kontrolü
MAX_PAYLOAD = int(os.getenv("MAX_PAYLOAD_KB", "512")) * 1024
