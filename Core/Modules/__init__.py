# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Settings              import UPLOAD_DIR
from Public.WebSocket.Libs import WatchPartyManager
from pathlib               import Path

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    # ! Ortak oturum süreç başında kurulur, kapanışta yıkılır
    Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.state.watch_party = WatchPartyManager(upload_dir=UPLOAD_DIR)
    konsol.log(f"[green]Watch party oturumu hazır.[/] [dim]({UPLOAD_DIR})[/]")

    try:
        yield
    finally:
        await app.state.watch_party.close()
        del app.state.watch_party
        konsol.log("[yellow]Watch party oturumu kapatıldı.[/]")
