# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import kekik_FastAPI, Request

@kekik_FastAPI.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    # --- Temel Güvenlik Başlıkları ---
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"]        = "SAMEORIGIN"
    response.headers["Referrer-Policy"]        = "strict-origin-when-cross-origin"

    # --- Yüklenen medya başka sekmelerden de oynatılabilmeli ---
    response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

    # --- Permissions-Policy ---
    # Otomatik oynatma ve tam ekran izleme için açık; cihaz erişimleri kapalı
    response.headers["Permissions-Policy"] = (
        "camera=(), microphone=(), geolocation=(), payment=(), "
        "autoplay=(self), fullscreen=(self)"
    )

    if request.url.path.startswith("/api"):
        response.headers["X-Robots-Tag"] = "noindex, nofollow"

    # --- Gereksiz Bilgi Sızmalarını Temizle ---
    for header in ("server", "x-powered-by"):
        if header in response.headers:
            del response.headers[header]

    return response
