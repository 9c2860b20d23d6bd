# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import Request, JSONResponse
from .    import api_v1_router

@api_v1_router.get("/health")
async def health_check(request: Request):
    """API sağlık kontrolü"""
    manager = getattr(request.app.state, "watch_party", None)
    return JSONResponse({
        "success" : manager is not None,
        "status"  : "healthy" if manager is not None else "starting"
    })
