# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass

@dataclass(frozen=True)
class HostEvent:
    """Diğer katılımcılara duyurulacak host değişimi"""
    type    : str              # "hostChanged" | "hostLeft"
    host_id : str | None = None

    def to_dict(self) -> dict:
        if self.type == "hostLeft":
            return {"type": "hostLeft"}
        return {"type": self.type, "host_id": self.host_id}

class HostManager:
    """
    Aktif medya kaynağını (host) takip eder.

    Durumlar: NoHost (host_id None) ve HasHost(id).
    Yeni bildirim her zaman kazanır; takeover serbesttir.
    Müzakereyi asla başlatmaz, sadece adres bilgisini verir.
    """

    def __init__(self):
        self.host_id: str | None = None

    @property
    def has_host(self) -> bool:
        return self.host_id is not None

    def declare(self, user_id: str) -> HostEvent:
        """NoHost/HasHost --declare(id)--> HasHost(id)"""
        self.host_id = user_id
        return HostEvent("hostChanged", user_id)

    def disconnect(self, user_id: str) -> HostEvent | None:
        """Host ayrıldıysa NoHost'a geç ve hostLeft döndür, aksi halde None"""
        if self.host_id is None or self.host_id != user_id:
            return None

        self.host_id = None
        return HostEvent("hostLeft")

    def clear(self) -> None:
        self.host_id = None
