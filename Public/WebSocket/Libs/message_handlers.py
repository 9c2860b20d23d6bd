# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                import konsol
from fastapi            import WebSocket
from .WatchPartyManager import WatchPartyManager
from .SessionAuthority  import InvalidPosition
import json


class MessageHandler:
    """WebSocket mesaj işleyici sınıfı"""

    def __init__(self, websocket: WebSocket, manager: WatchPartyManager):
        self.websocket = websocket
        self.manager   = manager
        self.user      = None

    async def send_error(self, message: str):
        """Hata mesajı gönder"""
        await self.websocket.send_text(json.dumps({
            "type"    : "error",
            "message" : message
        }, ensure_ascii=False))

    async def send_json(self, data: dict):
        """JSON mesajı gönder"""
        await self.websocket.send_text(json.dumps(data, ensure_ascii=False))

    # ============== Handlers ==============

    async def handle_connect(self):
        """Bağlantı açıldı: kimlik, otorite snapshot'ı ve mevcut medya"""
        self.user = self.manager.join(self.websocket)
        konsol.log(f"[green]Katıldı:[/] {self.user.username} ({self.user.user_id})")

        await self.send_json(self.manager.welcome(self.user))

        # Medya önce: client yüklerken pozisyonu sıfırlar, snapshot sonra uygulanır
        if media := self.manager.current_media():
            await self.send_json(media)

        await self.send_json(self.manager.sync_state())

        await self.manager.system_chat(f"{self.user.username} partiye katıldı!", exclude_user_id=self.user.user_id)

    async def handle_play(self, message: dict):
        """PLAY mesajını işle"""
        await self._playback(self.manager.play, message)

    async def handle_pause(self, message: dict):
        """PAUSE mesajını işle"""
        await self._playback(self.manager.pause, message)

    async def handle_seek(self, message: dict):
        """SEEK mesajını işle"""
        await self._playback(self.manager.seek, message)

    async def _playback(self, fn, message: dict):
        try:
            await fn(self.user, message.get("time"))
        except InvalidPosition as hata:
            await self.send_error(str(hata))

    async def handle_sync_request(self):
        """SYNC_REQUEST: güncel otorite durumunu tekrar gönder"""
        await self.send_json(self.manager.sync_state())

    async def handle_become_host(self):
        """BECOME_HOST mesajını işle"""
        await self.manager.become_host(self.user)

    async def handle_signal(self, message: dict):
        """SIGNAL mesajını hedefe aktar"""
        target_id = message.get("to")
        if not isinstance(target_id, str) or "signal" not in message:
            return

        await self.manager.relay_signal(self.user, target_id, message["signal"])

    async def handle_chat(self, message: dict):
        """CHAT mesajını işle"""
        text = message.get("text")
        if not isinstance(text, str):
            return

        chat_msg = await self.manager.user_chat(self.user, text)
        if chat_msg:
            konsol.log(f"[cyan]Chat[/] {chat_msg.author}: {chat_msg.text}")

    async def handle_ping(self, message: dict):
        """PING mesajını işle"""
        # Client'tan gelen _ping_id'yi geri döndür (RTT hesabı için)
        ping_id = message.get("_ping_id")
        pong_response = {"type": "pong"}
        if ping_id is not None:
            pong_response["_ping_id"] = ping_id

        await self.send_json(pong_response)

    async def handle_disconnect(self):
        """Kullanıcı bağlantısı koptuğunda çağrılır"""
        if not self.user:
            return

        participant, host_event = self.manager.leave(self.user.user_id)
        if not participant:
            return

        konsol.log(f"[red]Ayrıldı:[/] {participant.username} ({participant.user_id})")

        if host_event:
            await self.manager.announce_host_left(host_event)

        await self.manager.system_chat(f"{participant.username} partiden ayrıldı.")
