"""
Génération des codes d'accès aux classes.

Un code fait 6 caractères pris dans A-Z0-9 (36^6 ≈ 2,2 milliards de combinaisons).
Les collisions sont rarissimes, mais le nombre de tirages reste borné : le résultat
indique explicitement l'épuisement au lieu de boucler indéfiniment.
"""

import secrets
import string
from dataclasses import dataclass
from typing import Callable, Optional

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


@dataclass(frozen=True)
class JoinCodeResult:
    code: Optional[str]  # None = toutes les tentatives sont entrées en collision
    attempts: int

    @property
    def exhausted(self) -> bool:
        return self.code is None


def random_code(length: int = CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_join_code(
    exists: Callable[[str], bool],
    max_attempts: int = 20,
    draw: Callable[[], str] = random_code,
) -> JoinCodeResult:
    """
    Tire des codes jusqu'à en trouver un que `exists` ne connaît pas.
    Au plus `max_attempts` tirages.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = draw()
        if not exists(candidate):
            return JoinCodeResult(code=candidate, attempts=attempt)
    return JoinCodeResult(code=None, attempts=max_attempts)
