# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import APIRouter
from Core    import Request, PROJE

api_v1_router         = APIRouter(prefix="/api/v1")
api_v1_global_message = {
    "with" : PROJE
}

@api_v1_router.get("")
async def get_api_v1_router(request: Request):
    return api_v1_global_message


# ! ----------------------------------------» Routers
from . import (
    health,
    session
)
