# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__                import annotations
from CLI                       import konsol
from typing                    import Any, Callable
from websockets.asyncio.client import connect, ClientConnection
from websockets.exceptions     import ConnectionClosed
from .SyncEngine               import SyncEngine, MediaPlayer, PlaybackRejected
from .PeerLinks                import PeerLinkManager, PeerFactory, PeerLink
import json

class WatchPartyClient:
    """
    Python tarafı katılımcı: kanal bağlantısı, senkron motoru ve peer bağlantıları.

    Kanal kopması oturumun sonudur; yeniden bağlanmada kaçırılan mesajlar
    tekrar oynatılmaz, yeni bir kimlikle baştan katılınır.
    """

    def __init__(
        self,
        url             : str,
        player          : MediaPlayer,
        peer_factory    : PeerFactory,
        *,
        on_chat         : Callable[[dict], None] | None = None,
        on_status       : Callable[[str], None] | None = None,
        on_stream       : Callable[[PeerLink, Any], None] | None = None,
        on_play_blocked : Callable[[PlaybackRejected], None] | None = None,
    ):
        self.url      = url
        self.user_id  : str | None = None
        self.username : str | None = None
        self.media    : dict | None = None
        self.engine   = SyncEngine(player, self.send, on_play_blocked=on_play_blocked)
        self.peers    = PeerLinkManager(
            self.send,
            peer_factory,
            on_status = on_status,
            on_stream = on_stream,
            on_reset  = self.engine.reset_media
        )
        self._on_chat = on_chat
        self._ws      : ClientConnection | None = None

        self._handlers = {
            "welcome"       : self._handle_welcome,
            "syncState"     : self._handle_sync_state,
            "play"          : self._handle_play,
            "pause"         : self._handle_pause,
            "seek"          : self._handle_seek,
            "hostChanged"   : self._handle_host_changed,
            "hostLeft"      : self._handle_host_left,
            "signal"        : self._handle_signal,
            "chatMessage"   : self._handle_chat,
            "videoUploaded" : self._handle_video_uploaded,
            "error"         : self._handle_error,
        }

    # ============== Kanal ==============

    async def __aenter__(self) -> WatchPartyClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def connect(self) -> None:
        self._ws = await connect(self.url)
        konsol.log(f"[green]Sunucuya bağlandı:[/] {self.url}")

    async def run(self) -> None:
        """Kanal kapanana kadar mesajları işle"""
        if self._ws is None:
            raise RuntimeError("Önce connect() çağrılmalı")

        try:
            async for raw in self._ws:
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError:
                    konsol.log(f"[red]Geçersiz mesaj:[/] {raw!r}")
                    continue
                await self.handle_message(message)
        except ConnectionClosed:
            pass
        finally:
            await self._teardown()

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
        await self._teardown()

    async def send(self, message: dict) -> None:
        if self._ws is None:
            return

        try:
            await self._ws.send(json.dumps(message, ensure_ascii=False))
        except ConnectionClosed:
            konsol.log(f"[yellow]Kanal kapalı, gönderilemedi:[/] {message.get('type')}")

    async def _teardown(self) -> None:
        self._ws = None
        await self.peers.close_all()

    # ============== Kullanıcı eylemleri ==============

    async def send_chat(self, text: str) -> None:
        if text := text.strip():
            await self.send({"type": "chatMessage", "text": text})

    async def become_host(self, stream: Any) -> None:
        await self.peers.become_host(stream)

    async def request_sync(self) -> None:
        await self.send({"type": "syncRequest"})

    # ============== Gelen mesajlar ==============

    async def handle_message(self, message: dict) -> None:
        handler = self._handlers.get(message.get("type"))
        if handler:
            await handler(message)

    async def _handle_welcome(self, message: dict) -> None:
        self.user_id  = message["user_id"]
        self.username = message.get("username")
        await self.peers.on_welcome(self.user_id, message.get("host_id"))

    async def _handle_sync_state(self, message: dict) -> None:
        await self.engine.apply_sync_state(message)

    async def _handle_play(self, message: dict) -> None:
        await self.engine.apply_remote_play(message["time"])

    async def _handle_pause(self, message: dict) -> None:
        await self.engine.apply_remote_pause(message["time"])

    async def _handle_seek(self, message: dict) -> None:
        await self.engine.apply_remote_seek(message["time"])

    async def _handle_host_changed(self, message: dict) -> None:
        await self.peers.on_host_changed(message.get("host_id"))

    async def _handle_host_left(self, message: dict) -> None:
        await self.peers.on_host_left()

    async def _handle_signal(self, message: dict) -> None:
        await self.peers.on_signal(message["from"], message.get("signal"))

    async def _handle_chat(self, message: dict) -> None:
        if self._on_chat:
            self._on_chat(message)

    async def _handle_video_uploaded(self, message: dict) -> None:
        self.media = {"url": message["url"], "filename": message.get("filename")}
        await self.engine.load_media(message["url"])

    async def _handle_error(self, message: dict) -> None:
        konsol.log(f"[red]Sunucu hatası:[/] {message.get('message')}")
