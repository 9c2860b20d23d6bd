# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SyncEngine       import SyncEngine, SyncMode, MediaPlayer, PlaybackRejected, DRIFT_THRESHOLD
from .PeerLinks        import PeerLink, PeerLinkManager, PeerConnection, NO_STREAM_STATUS
from .WatchPartyClient import WatchPartyClient
