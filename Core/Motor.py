# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from Settings import AYAR, HOST, PORT
from sys      import version_info
import uvicorn, socket

def ag_adresleri() -> list[str]:
    """Loopback dışındaki IPv4 adresleri (LAN'daki cihazlar bunlarla bağlanır)"""
    adresler = set()

    try:
        for bilgi in socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET):
            adresler.add(bilgi[4][0])
    except socket.gaierror:
        pass

    # Varsayılan rota üzerinden çıkış arayüzü (paket gönderilmez)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        try:
            sock.connect(("10.255.255.255", 1))
            adresler.add(sock.getsockname()[0])
        except OSError:
            pass

    return sorted(adres for adres in adresler if not adres.startswith("127."))

def basla():
    surum = f"{version_info[0]}.{version_info[1]}"
    konsol.print(f"\n[bold gold1]{AYAR['PROJE']}[/] [yellow]:bird:[/] [turquoise2]Python {surum}[/] [bold yellow2]uvicorn[/]", width=70, justify="center")
    konsol.print(f"[red]{HOST}[light_coral]:[/]{PORT}[pale_green1] başlatılmıştır...[/]\n", width=70, justify="center")

    for adres in ag_adresleri():
        konsol.print(f"[pale_green1]Ağ adresi:[/] [bold turquoise2]http://{adres}:{PORT}[/]", width=70, justify="center")

    # Tek oda durumu süreç içinde tutulur: tek worker zorunlu
    uvicorn.run("Core:kekik_FastAPI", host=HOST, port=PORT, proxy_headers=True, forwarded_allow_ips="*", workers=1, log_level="error")
