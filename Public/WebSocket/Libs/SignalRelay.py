# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing import Awaitable, Callable, Any

Lookup = Callable[[str], Any]
Sender = Callable[[Any, dict], Awaitable[bool]]

class SignalRelay:
    """
    Müzakere payload'larını iki katılımcı arasında taşır.
    Hiçbir şey saklamaz; payload içeriğine bakmaz.
    """

    def __init__(self, lookup: Lookup, send: Sender):
        self._lookup = lookup
        self._send   = send

    async def relay(self, sender_id: str, target_id: str, payload: Any) -> bool:
        """Hedef bağlıysa ilet; değilse sessizce düşür (kuyruk yok, tekrar yok)"""
        target = self._lookup(target_id)
        if target is None:
            return False

        return await self._send(target, {
            "type"   : "signal",
            "from"   : sender_id,
            "signal" : payload
        })
