# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from typing      import Literal

class UnknownSignal(ValueError):
    """Tanınmayan müzakere payload'ı"""

@dataclass(frozen=True)
class SessionDescription:
    """SDP offer / answer"""
    kind : Literal["offer", "answer"]
    sdp  : str

    def to_wire(self) -> dict:
        return {"type": self.kind, "sdp": self.sdp}

@dataclass(frozen=True)
class IceCandidate:
    """Trickle ICE adayı"""
    candidate       : str
    sdp_mid         : str | None = None
    sdp_mline_index : int | None = None

    def to_wire(self) -> dict:
        return {
            "type"      : "candidate",
            "candidate" : {
                "candidate"     : self.candidate,
                "sdpMid"        : self.sdp_mid,
                "sdpMLineIndex" : self.sdp_mline_index
            }
        }

@dataclass(frozen=True)
class Renegotiate:
    """Peer kütüphanesinin yeniden müzakere / transceiver istekleri"""
    kind   : Literal["renegotiate", "transceiverRequest"]
    detail : dict = field(default_factory=dict)

    def to_wire(self) -> dict:
        return {"type": self.kind, **self.detail}

Signal = SessionDescription | IceCandidate | Renegotiate

def parse_signal(raw) -> Signal:
    """Sunucudan gelen opak payload'ı tipli varyanta çevir"""
    if not isinstance(raw, dict):
        raise UnknownSignal(f"Sinyal dict değil: {type(raw).__name__}")

    tip = raw.get("type")

    if tip in ("offer", "answer"):
        sdp = raw.get("sdp")
        if not isinstance(sdp, str):
            raise UnknownSignal(f"{tip} için sdp eksik")
        return SessionDescription(kind=tip, sdp=sdp)

    # Eski sürümler adayları type alanı olmadan gönderir
    if tip == "candidate" or (tip is None and "candidate" in raw):
        aday = raw.get("candidate")
        if isinstance(aday, str):
            aday = {"candidate": aday}
        if not isinstance(aday, dict) or not isinstance(aday.get("candidate"), str):
            raise UnknownSignal("candidate alanı geçersiz")
        return IceCandidate(
            candidate       = aday["candidate"],
            sdp_mid         = aday.get("sdpMid"),
            sdp_mline_index = aday.get("sdpMLineIndex")
        )

    if tip in ("renegotiate", "transceiverRequest"):
        return Renegotiate(kind=tip, detail={k: v for k, v in raw.items() if k != "type"})

    raise UnknownSignal(f"Bilinmeyen sinyal tipi: {tip!r}")
