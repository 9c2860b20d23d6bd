# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__              import annotations
from CLI                     import konsol
from contextlib              import asynccontextmanager
from enum                    import Enum
from typing                  import Awaitable, Callable, Protocol
from Public.WebSocket.Models import now_ms

# Bu eşiğin altındaki farklar için seek yapılmaz (takılma olmasın)
DRIFT_THRESHOLD = 0.5

class SyncMode(Enum):
    LOCAL    = "local"     # oynatıcı değişikliği buradan çıktı, otoriteye bildirilir
    APPLYING = "applying"  # uzak güncelleme uygulanıyor, tekrar bildirilmez

class PlaybackRejected(Exception):
    """Ortam oynatmayı reddetti (ör. autoplay politikası)"""

class MediaPlayer(Protocol):
    """
    Yerel medya oynatıcı.

    `play()` ve `seek()` işlem tamamlandığında döner; `play()` reddedilirse
    `PlaybackRejected` fırlatır. Oynatıcı kendi olaylarını engine'in
    `on_local_*` metotlarına iletir.
    """

    @property
    def current_time(self) -> float: ...

    async def play(self) -> None: ...

    async def pause(self) -> None: ...

    async def seek(self, position: float) -> None: ...

    async def load(self, url: str | None) -> None: ...

Send = Callable[[dict], Awaitable[None]]

class SyncEngine:
    """
    Katılımcı başına senkronizasyon motoru.

    Yerel kaynaklı değişiklikleri otoriteye gönderir, uzaktan gelenleri
    oynatıcıya uygular. Uygulama sırasında oluşan oynatıcı olayları geri
    gönderilmez (geri besleme döngüsü yok).
    """

    def __init__(
        self,
        player          : MediaPlayer,
        send            : Send,
        *,
        clock           : Callable[[], int] = now_ms,
        drift_threshold : float = DRIFT_THRESHOLD,
        on_play_blocked : Callable[[PlaybackRejected], None] | None = None,
    ):
        self.player           = player
        self.mode             = SyncMode.LOCAL
        self.awaiting_gesture = False
        self.drift_threshold  = drift_threshold
        self._send            = send
        self._clock           = clock
        self._on_play_blocked = on_play_blocked
        self._in_flight       = 0

    # ============== Yerel olaylar ==============

    async def on_local_play(self) -> bool:
        return await self._emit("play")

    async def on_local_pause(self) -> bool:
        return await self._emit("pause")

    async def on_local_seek(self) -> bool:
        return await self._emit("seek")

    async def _emit(self, event: str) -> bool:
        if self.mode is SyncMode.APPLYING:
            return False

        await self._send({"type": event, "time": self.player.current_time})
        return True

    # ============== Uzak olaylar ==============

    async def apply_remote_play(self, position: float) -> None:
        async with self._applying():
            await self._correct_drift(position)
            await self._start_playback()

    async def apply_remote_pause(self, position: float) -> None:
        async with self._applying():
            await self.player.pause()
            await self._correct_drift(position)

    async def apply_remote_seek(self, position: float) -> None:
        async with self._applying():
            await self.player.seek(float(position))

    async def apply_sync_state(self, state: dict) -> float:
        """Otorite snapshot'ını uygula; katılım gecikmesini telafi eder"""
        target = self.start_position(state)

        async with self._applying():
            await self.player.seek(target)
            if state.get("is_playing"):
                await self._start_playback()
            else:
                await self.player.pause()

        return target

    def start_position(self, state: dict, now: int | None = None) -> float:
        """Oynuyorsa captured_at'ten bu yana geçen süreyi ekle"""
        position = float(state.get("position", 0.0))
        if not state.get("is_playing"):
            return position

        now     = self._clock() if now is None else now
        elapsed = max(0, now - int(state.get("captured_at", now))) / 1000
        return position + elapsed

    async def load_media(self, url: str | None) -> None:
        """Yeni kaynak: baştan ve duraklatılmış"""
        async with self._applying():
            await self.player.load(url)
            await self.player.pause()
            if url is not None:
                await self.player.seek(0.0)

        self.awaiting_gesture = False

    async def reset_media(self) -> None:
        await self.load_media(None)

    async def resume_after_gesture(self) -> bool:
        """Kullanıcı etkileşiminden sonra reddedilen oynatmayı tekrar dene"""
        if not self.awaiting_gesture:
            return False

        async with self._applying():
            await self._start_playback()

        return not self.awaiting_gesture

    # ============== Yardımcılar ==============

    def drift(self, position: float) -> float:
        return abs(self.player.current_time - float(position))

    async def _correct_drift(self, position: float) -> None:
        if self.drift(position) > self.drift_threshold:
            await self.player.seek(float(position))

    async def _start_playback(self) -> None:
        try:
            await self.player.play()
        except PlaybackRejected as hata:
            self.awaiting_gesture = True
            konsol.log(f"[yellow]Oynatma engellendi, kullanıcı etkileşimi bekleniyor:[/] {hata}")
            if self._on_play_blocked:
                self._on_play_blocked(hata)
        else:
            self.awaiting_gesture = False

    @asynccontextmanager
    async def _applying(self):
        # Üst üste binen uygulamalar: hepsi bitene kadar APPLYING
        self._in_flight += 1
        self.mode = SyncMode.APPLYING
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self.mode = SyncMode.LOCAL
