# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__ import annotations
from CLI        import konsol
from typing     import Any, Awaitable, Callable, Protocol
from ..Models   import Signal, UnknownSignal, parse_signal

NO_STREAM_STATUS = "Hata: Paylaşılacak yayın yok!"

class PeerConnection(Protocol):
    """Peer kütüphanesinin bağlantı nesnesi (ör. WebRTC)"""

    async def signal(self, payload: Signal) -> None: ...

    async def close(self) -> None: ...

Send        = Callable[[dict], Awaitable[None]]
PeerFactory = Callable[["PeerLink"], PeerConnection]

class PeerLink:
    """
    Yerel katılımcı ile bir uzak katılımcı arasındaki doğrudan bağlantı.
    Sadece uç noktalarda yaşar; sunucu bağlantı durumunu hiç görmez.
    """

    def __init__(self, manager: PeerLinkManager, remote_id: str, initiator: bool, stream: Any | None):
        self.manager    = manager
        self.remote_id  = remote_id
        self.initiator  = initiator
        self.stream     = stream
        self.connected  = False
        self.closed     = False
        self.connection : PeerConnection | None = None

    # Peer kütüphanesinden gelen olaylar

    async def emit_signal(self, payload: Signal) -> None:
        """Üretilen müzakere payload'ını sunucu üzerinden karşı tarafa gönder"""
        if self.closed:
            return

        await self.manager.send({
            "type"   : "signal",
            "to"     : self.remote_id,
            "signal" : payload.to_wire()
        })

    def on_connect(self) -> None:
        self.connected = True
        self.manager.status("P2P bağlandı! Veri bekleniyor...")

    def on_stream(self, stream: Any) -> None:
        konsol.log(f"[green]Yayın alındı:[/] {self.remote_id}")
        self.manager.stream_received(self, stream)

    async def on_close(self) -> None:
        self.closed = True
        self.manager.forget(self)

    async def on_error(self, hata: Exception) -> None:
        konsol.log(f"[red]Peer hatası ({self.remote_id}):[/] {hata}")
        await self.destroy()

    # Sunucudan gelen sinyaller

    async def receive_signal(self, raw) -> None:
        try:
            payload = parse_signal(raw)
        except UnknownSignal as hata:
            await self.on_error(hata)
            return

        if self.connection and not self.closed:
            await self.connection.signal(payload)

    async def destroy(self) -> None:
        if self.closed:
            self.manager.forget(self)
            return

        self.closed = True
        self.manager.forget(self)
        if self.connection:
            try:
                await self.connection.close()
            except Exception as hata:
                konsol.log(f"[red]Peer kapatılamadı ({self.remote_id}):[/] {hata}")

class PeerLinkManager:
    """
    Host değişimlerine göre peer bağlantılarını kurar ve yıkar.

    İzleyici host'a initiator olarak bağlanır; host gelen ilk sinyalde
    karşılık veren (non-initiator) bağlantıyı kurar.
    """

    def __init__(
        self,
        send      : Send,
        factory   : PeerFactory,
        *,
        on_status : Callable[[str], None] | None = None,
        on_stream : Callable[[PeerLink, Any], None] | None = None,
        on_reset  : Callable[[], Awaitable[None]] | None = None,
    ):
        self.send         = send
        self.local_id     : str | None = None
        self.host_id      : str | None = None
        self.local_stream : Any | None = None
        self.peers        : dict[str, PeerLink] = {}
        self.last_status  = ""
        self._factory     = factory
        self._on_status   = on_status
        self._on_stream   = on_stream
        self._on_reset    = on_reset

    @property
    def am_host(self) -> bool:
        return self.host_id is not None and self.host_id == self.local_id

    def status(self, text: str) -> None:
        self.last_status = text
        if self._on_status:
            self._on_status(text)

    # ============== Host olayları ==============

    async def on_welcome(self, user_id: str, host_id: str | None) -> None:
        self.local_id = user_id
        await self._adopt_host(host_id, "Host bulundu. P2P bağlanılıyor...")

    async def on_host_changed(self, host_id: str | None) -> None:
        await self._adopt_host(host_id, "Yeni host bulundu. Bağlanılıyor...")

    async def on_host_left(self) -> None:
        self.host_id = None
        await self.close_all()
        if self._on_reset:
            await self._on_reset()
        self.status("Host ayrıldı. Yeni host bekleniyor...")

    async def become_host(self, stream: Any) -> None:
        """Yerel yayını sakla ve host olduğunu duyur"""
        self.local_stream = stream
        self.host_id      = self.local_id
        await self.send({"type": "becomeHost"})
        self.status("Host sensin 👑")

    async def _adopt_host(self, host_id: str | None, connecting_status: str) -> None:
        previous, self.host_id = self.host_id, host_id

        # Host el değiştirdi: eski yayının bağlantıları kapanır
        if previous and previous != host_id:
            if previous == self.local_id:
                await self.close_all()
            elif old_link := self.peers.get(previous):
                konsol.log(f"[yellow]Eski host bağlantısı kapatılıyor:[/] {previous}")
                await old_link.destroy()

        if host_id and host_id != self.local_id:
            self.status(connecting_status)
            await self.connect(host_id, initiator=True)
        elif self.am_host:
            self.status("Host sensin 👑")
        else:
            self.status("Host yok. Yayın yapmak için bir film seç!")

    # ============== Sinyal ==============

    async def on_signal(self, from_id: str, raw) -> None:
        if self.am_host and from_id not in self.peers:
            if self.local_stream is None:
                konsol.log(f"[red]Sinyal geldi ama paylaşılacak yerel yayın yok:[/] {from_id}")
                self.status(NO_STREAM_STATUS)
                return
            await self.connect(from_id, initiator=False)

        link = self.peers.get(from_id)
        if link:
            await link.receive_signal(raw)

    # ============== Bağlantı yaşam döngüsü ==============

    async def connect(self, remote_id: str, initiator: bool) -> PeerLink:
        if existing := self.peers.get(remote_id):
            await existing.destroy()

        konsol.log(f"[cyan]Peer oluşturuluyor:[/] {remote_id} [dim](initiator: {initiator})[/]")
        self.status("Bağlantı başlatılıyor..." if initiator else "Bağlantıya yanıt veriliyor...")

        link = PeerLink(self, remote_id, initiator, self.local_stream)
        self.peers[remote_id] = link
        link.connection = self._factory(link)
        return link

    def forget(self, link: PeerLink) -> None:
        if self.peers.get(link.remote_id) is link:
            del self.peers[link.remote_id]

    def stream_received(self, link: PeerLink, stream: Any) -> None:
        if self._on_stream:
            self._on_stream(link, stream)

    async def close_all(self) -> None:
        for link in list(self.peers.values()):
            await link.destroy()
        self.peers.clear()
