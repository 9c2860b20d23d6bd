# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import APIRouter

wss_router = APIRouter(prefix="/ws")

from . import watch_party
