# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import kekik_FastAPI, Request, JSONResponse, Response
from time        import time
from user_agents import parse
import asyncio

# Film yüklemeleri için daha uzun timeout
UZUN_TIMEOUT_PATHS = ("/upload",)
SKIP_PATHS         = ("/favicon.ico", "/uploads/", "/api/v1/health")

@kekik_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    try:
        ua_header = request.headers.get("User-Agent")
        parsed_ua = parse(ua_header)
        cihaz = ua_header if str(parsed_ua).split("/")[2].strip() == "Other" else parsed_ua
    except Exception:
        cihaz = request.headers.get("User-Agent")

    fw_for    = request.headers.get("X-Forwarded-For")
    client_ip = fw_for.split(",")[0].strip() if fw_for else (request.client.host if request.client else "-")

    log_veri = {
        "method" : request.method,
        "url"    : str(request.url).rstrip("?").split("?")[0],
        "kod"    : None,
        "sure"   : None,
        "ip"     : client_ip,
        "cihaz"  : cihaz,
    }

    timeout_suresi = 120 if request.url.path.startswith(UZUN_TIMEOUT_PATHS) else 30

    try:
        response = await asyncio.wait_for(call_next(request), timeout=timeout_suresi)
        log_veri["kod"] = response.status_code if response else 502
        if not response:
            response = JSONResponse(status_code=502, content={"ups": "Yanıt Gelmedi.."})
    except asyncio.TimeoutError:
        log_veri["kod"] = 504
        response        = JSONResponse(status_code=504, content={"ups": "Zaman Aşımı.."})
        konsol.log(f"[red]⏱️ Timeout:[/] {request.url.path} - {timeout_suresi}sn aşıldı")
    except asyncio.CancelledError:
        log_veri["kod"] = 499  # Client Closed Request
        konsol.log(f"[yellow]🚫 İstemci bağlantıyı kapattı:[/] {request.url.path}")
        raise
    except RuntimeError as exc:
        if "No response returned" in str(exc):
            konsol.log(f"[yellow]⚠️ Response yok:[/] {request.url.path}")
            return Response(status_code=204)
        raise
    except Exception as exc:
        log_veri["kod"] = 500
        response        = JSONResponse(status_code=500, content={"ups": "Sunucu Hatası.."})
        konsol.log(f"[red]❌ Beklenmeyen hata:[/] {request.url.path} - {exc}")

    if request.url.path.startswith(SKIP_PATHS):
        return response

    log_veri["sure"] = round(time() - baslangic_zamani, 2)
    log_salla(log_veri)

    return response

def log_salla(log_veri: dict):
    LABEL_WIDTH  = 5
    durum_label  = f"[green]{'durum':<{LABEL_WIDTH}}:[/]"
    ip_label     = f"[green]{'ip':<{LABEL_WIDTH}}:[/]"
    cihaz_label  = f"[green]{'cihaz':<{LABEL_WIDTH}}:[/]"

    log_lines = [
        f"[bold blue]»[/] [bold turquoise2]{log_veri['url']}[/]",
        (
            f"  {durum_label} [bold green]{log_veri['method']}[/]"
            f" [blue]-[/] [bold bright_yellow]{log_veri['kod']}[/]"
            f" [blue]-[/] [bold yellow2]{log_veri['sure']} sn[/]"
        ),
        f"  {ip_label} [bold red]{log_veri['ip']}[/]",
        f"  {cihaz_label} [magenta]{log_veri['cihaz']}[/]",
    ]

    konsol.log("\n".join(log_lines) + "\n")
