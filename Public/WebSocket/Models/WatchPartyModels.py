# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from fastapi     import WebSocket
from typing      import Literal
import uuid, time

def now_ms() -> int:
    """Duvar saati (epoch ms)"""
    return int(time.time() * 1000)

@dataclass
class Participant:
    """Watch Party katılımcısı"""
    websocket : WebSocket
    username  : str
    user_id   : str = field(default_factory=lambda: str(uuid.uuid4())[:8])

@dataclass
class PlaybackState:
    """Otoritenin tuttuğu tek oynatım durumu"""
    is_playing  : bool  = False
    position    : float = 0.0
    captured_at : int   = field(default_factory=now_ms)  # position'ın doğru olduğu an

    def to_dict(self) -> dict:
        return {
            "is_playing"  : self.is_playing,
            "position"    : self.position,
            "captured_at" : self.captured_at,
        }

@dataclass
class ChatMessage:
    """Chat mesajı"""
    kind    : Literal["system", "user"]
    text    : str
    author  : str | None = None
    sent_at : int        = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "type"    : "chatMessage",
            "kind"    : self.kind,
            "author"  : self.author,
            "text"    : self.text,
            "sent_at" : self.sent_at,
        }
