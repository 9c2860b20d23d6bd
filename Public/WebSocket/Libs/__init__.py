# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .WatchPartyManager import WatchPartyManager
from .message_handlers  import MessageHandler
