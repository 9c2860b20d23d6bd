# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .WatchPartyModels import Participant, PlaybackState, ChatMessage, now_ms
