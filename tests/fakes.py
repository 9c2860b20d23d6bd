import asyncio
import json

from Public.WatchParty.Libs import PlaybackRejected


class FakeWebSocket:
    """Server tarafı WebSocket yerine geçer; gönderilenleri saklar."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict] = []
        self.closed_with: int | None = None
        self.fail = fail

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(text))

    async def close(self, code: int = 1000) -> None:
        self.closed_with = code

    def of_type(self, message_type: str) -> list[dict]:
        return [message for message in self.sent if message["type"] == message_type]


class FakePlayer:
    """Tarayıcıdaki video elemanı gibi davranır: her değişiklikte olay üretir."""

    def __init__(self, reject_plays: int = 0) -> None:
        self.engine = None
        self.current_time = 0.0
        self.paused = True
        self.url: str | None = "movie.mp4"
        self.calls: list = []
        self.reject_plays = reject_plays
        self.seek_gate: asyncio.Event | None = None

    async def play(self) -> None:
        self.calls.append("play")
        if self.reject_plays:
            self.reject_plays -= 1
            raise PlaybackRejected("autoplay blocked")
        self.paused = False
        await self.engine.on_local_play()

    async def pause(self) -> None:
        self.calls.append("pause")
        self.paused = True
        await self.engine.on_local_pause()

    async def seek(self, position: float) -> None:
        self.calls.append(("seek", position))
        if self.seek_gate is not None:
            await self.seek_gate.wait()
        self.current_time = position
        await self.engine.on_local_seek()

    async def load(self, url: str | None) -> None:
        self.calls.append(("load", url))
        self.url = url
        self.current_time = 0.0
        self.paused = True


class FakeConnection:
    """Peer kütüphanesi bağlantısı."""

    def __init__(self, link) -> None:
        self.link = link
        self.received: list = []
        self.closed = False

    async def signal(self, payload) -> None:
        self.received.append(payload)

    async def close(self) -> None:
        self.closed = True


class Outbox:
    """Engine / peer manager'ın gönderdiği mesajları toplar."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    async def __call__(self, message: dict) -> None:
        self.messages.append(message)

    def of_type(self, message_type: str) -> list[dict]:
        return [message for message in self.messages if message["type"] == message_type]
