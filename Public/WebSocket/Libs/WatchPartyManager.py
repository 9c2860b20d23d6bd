# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from fastapi           import WebSocket
from pathlib           import Path
from Settings          import UPLOAD_DIR, UPLOAD_PREFIX
from ..Models          import Participant, ChatMessage, now_ms
from .SessionAuthority import SessionAuthority
from .HostManager      import HostManager, HostEvent
from .SignalRelay      import SignalRelay
from .username         import random_username
import json, asyncio

SEND_TIMEOUT = 1.5

class WatchPartyManager:
    """
    Tek ortak oda: katılımcı kaydı, oynatım otoritesi, host yönetimi ve sinyal aktarımı.

    Lifespan içinde oluşturulur, kapanışta `close()` ile kapatılır.
    Durum değişiklikleri senkron yapılır, yayın (broadcast) değişiklikten sonra gelir.
    """

    def __init__(self, upload_dir: str | Path = UPLOAD_DIR, clock=now_ms):
        self.participants: dict[str, Participant] = {}
        self.authority  = SessionAuthority(clock)
        self.host       = HostManager()
        self.relay      = SignalRelay(self.get_participant, self.send_to)
        self.upload_dir = Path(upload_dir)

    # ============== Katılımcı kaydı ==============

    def join(self, websocket: WebSocket) -> Participant:
        """Yeni bağlantıyı kaydet, kimlik ata"""
        participant = Participant(websocket=websocket, username=random_username())
        self.participants[participant.user_id] = participant
        return participant

    def leave(self, user_id: str) -> tuple[Participant | None, HostEvent | None]:
        """Kaydı sil; host ayrıldıysa hostLeft olayını da döndür"""
        participant = self.participants.pop(user_id, None)
        if not participant:
            return None, None

        return participant, self.host.disconnect(user_id)

    def get_participant(self, user_id: str) -> Participant | None:
        return self.participants.get(user_id)

    # ============== Snapshot'lar ==============

    def welcome(self, participant: Participant) -> dict:
        return {
            "type"     : "welcome",
            "user_id"  : participant.user_id,
            "username" : participant.username,
            "host_id"  : self.host.host_id
        }

    def sync_state(self) -> dict:
        return {"type": "syncState", **self.authority.on_join()}

    def current_media(self) -> dict | None:
        """Yüklenmiş bir film varsa videoUploaded mesajı"""
        if not self.upload_dir.is_dir():
            return None

        for dosya in sorted(self.upload_dir.iterdir()):
            if dosya.is_file() and dosya.name.startswith(UPLOAD_PREFIX):
                return {
                    "type"     : "videoUploaded",
                    "url"      : f"/uploads/{dosya.name}",
                    "filename" : "Current Movie"
                }

        return None

    def snapshot(self) -> dict:
        return {
            "participants" : len(self.participants),
            "host_id"      : self.host.host_id,
            "playback"     : self.authority.on_join()
        }

    # ============== Oynatım ==============

    async def play(self, participant: Participant, position) -> None:
        state = self.authority.on_play(position)
        await self._broadcast_playback("play", state.position, participant)

    async def pause(self, participant: Participant, position) -> None:
        state = self.authority.on_pause(position)
        await self._broadcast_playback("pause", state.position, participant)

    async def seek(self, participant: Participant, position) -> None:
        state = self.authority.on_seek(position)
        await self._broadcast_playback("seek", state.position, participant)

    async def _broadcast_playback(self, event: str, position: float, participant: Participant) -> None:
        # Gönderene yankı yok
        await self.broadcast({
            "type"         : event,
            "time"         : position,
            "triggered_by" : participant.username
        }, exclude_user_id=participant.user_id)

    async def media_uploaded(self, url: str, filename: str) -> None:
        """Yeni medya: oynatım durumunu sıfırla ve herkese duyur"""
        self.authority.reset()
        await self.broadcast({
            "type"     : "videoUploaded",
            "url"      : url,
            "filename" : filename
        })

    # ============== Host & Sinyal ==============

    async def become_host(self, participant: Participant) -> None:
        event = self.host.declare(participant.user_id)
        konsol.log(f"[yellow]👑 Yeni host:[/] {participant.username} ({participant.user_id})")
        await self.broadcast(event.to_dict(), exclude_user_id=participant.user_id)

    async def announce_host_left(self, event: HostEvent) -> None:
        konsol.log("[yellow]👑 Host ayrıldı, oda hostsuz[/]")
        await self.broadcast(event.to_dict())

    async def relay_signal(self, participant: Participant, target_id: str, payload) -> bool:
        delivered = await self.relay.relay(participant.user_id, target_id, payload)
        if not delivered:
            konsol.log(f"[dim]Sinyal düşürüldü:[/] {participant.user_id} » {target_id}")
        return delivered

    # ============== Chat ==============

    async def user_chat(self, participant: Participant, text: str) -> ChatMessage | None:
        text = text.strip()
        if not text:
            return None

        chat_msg = ChatMessage(kind="user", text=text, author=participant.username or "Anonim")
        await self.broadcast(chat_msg.to_dict())
        return chat_msg

    async def system_chat(self, text: str, exclude_user_id: str | None = None) -> ChatMessage:
        chat_msg = ChatMessage(kind="system", text=text)
        await self.broadcast(chat_msg.to_dict(), exclude_user_id=exclude_user_id)
        return chat_msg

    # ============== Gönderim ==============

    async def send_to(self, participant: Participant, message: dict) -> bool:
        """Tek katılımcıya gönder; yavaş/kopmuş client'ı sessizce atla"""
        try:
            await asyncio.wait_for(
                participant.websocket.send_text(json.dumps(message, ensure_ascii=False)),
                timeout = SEND_TIMEOUT
            )
            return True
        except Exception:
            return False

    async def broadcast(self, message: dict, exclude_user_id: str | None = None) -> None:
        """Odadaki herkese mesaj gönder (parallel safe send)"""
        targets = [
            participant
                for user_id, participant in list(self.participants.items())
                    if not (exclude_user_id and user_id == exclude_user_id)
        ]
        if not targets:
            return

        await asyncio.gather(*(self.send_to(participant, message) for participant in targets))

    async def close(self) -> None:
        """Kapanış: tüm soketleri kapat, durumu temizle"""
        participants = list(self.participants.values())
        self.participants.clear()
        self.host.clear()

        for participant in participants:
            try:
                await participant.websocket.close(code=1001)
            except Exception:
                pass
