# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import APIRouter

wp_router = APIRouter(prefix="")

from . import upload
