# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from ..Models import PlaybackState, now_ms
from typing   import Callable
import math

class InvalidPosition(ValueError):
    """Oynatım pozisyonu sayı değil veya geçersiz"""

def parse_position(value) -> float:
    """Client'tan gelen pozisyonu doğrula"""
    if isinstance(value, bool):
        raise InvalidPosition(f"Geçersiz pozisyon: {value!r}")

    try:
        position = float(value)
    except (TypeError, ValueError):
        raise InvalidPosition(f"Geçersiz pozisyon: {value!r}") from None

    if math.isnan(position) or math.isinf(position) or position < 0:
        raise InvalidPosition(f"Geçersiz pozisyon: {value!r}")

    return position

class SessionAuthority:
    """
    Tek oynatım durumunun sahibi.
    Son yazan kazanır; çakışma çözümü yoktur. Hiçbir metot await etmez,
    bu yüzden event loop üzerinde her değişiklik atomiktir.
    """

    def __init__(self, clock: Callable[[], int] = now_ms):
        self._clock = clock
        self.state  = PlaybackState(captured_at=clock())

    def on_join(self) -> dict:
        """Yeni katılımcıya olduğu gibi gönderilecek snapshot"""
        return self.state.to_dict()

    def on_play(self, position: float) -> PlaybackState:
        return self._update(position, is_playing=True)

    def on_pause(self, position: float) -> PlaybackState:
        return self._update(position, is_playing=False)

    def on_seek(self, position: float) -> PlaybackState:
        # Seek sadece pozisyonu değiştirir, oynatım durumunu korur
        return self._update(position, is_playing=self.state.is_playing)

    def reset(self) -> PlaybackState:
        """Yeni medya geldiğinde varsayılan duruma dön"""
        self.state = PlaybackState(captured_at=self._clock())
        return self.state

    def _update(self, position: float, is_playing: bool) -> PlaybackState:
        position = parse_position(position)

        self.state.is_playing  = is_playing
        self.state.position    = position
        self.state.captured_at = self._clock()
        return self.state
