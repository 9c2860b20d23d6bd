# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import random

ADJECTIVES = ["Happy", "Cool", "Super", "Fast", "Quiet", "Loud", "Brave", "Calm", "Mystic", "Neon"]
NOUNS      = ["Panda", "Tiger", "Eagle", "Lion", "Bear", "Wolf", "Fox", "Cat", "Dragon", "Phoenix"]

def random_username(rng: random.Random | None = None) -> str:
    """Rastgele görünen isim üret: 'Neon Fox 42'"""
    rng = rng or random
    return f"{rng.choice(ADJECTIVES)} {rng.choice(NOUNS)} {rng.randrange(100)}"
