# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                 import kekik_FastAPI, Request, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions   import RequestValidationError

@kekik_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@kekik_FastAPI.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Doğrulama hatalarını JSON olarak döndür"""
    errors   = exc.errors()
    messages = [f"{e['loc'][-1]}: {e['msg']}" for e in errors]

    return JSONResponse(
        status_code = 422,
        content     = {"success": False, "message": " | ".join(messages)}
    )
