# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SignalModels import SessionDescription, IceCandidate, Renegotiate, Signal, UnknownSignal, parse_signal
