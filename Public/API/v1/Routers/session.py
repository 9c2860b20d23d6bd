# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import Request
from .    import api_v1_router, api_v1_global_message

@api_v1_router.get("/session")
async def session_state(request: Request):
    """Ortak oturumun anlık görüntüsü: katılımcı sayısı, host ve oynatım"""
    return {
        **api_v1_global_message,
        "result" : request.app.state.watch_party.snapshot()
    }
