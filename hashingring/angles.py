"""
Key hash -> angle on the ring.

Angles are degrees in [0, 360). The fold from a signed 32-bit hash into the
unsigned window is monotonic and reproducible across implementations that
share the same hash function.
"""
from typing import Any, Callable

import mmh3

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
POSITIVE_HASH_WINDOW = INT32_MAX + INT32_MAX + 1
FULL_CIRCLE = 360.0

HashFunc = Callable[[Any], int]


def _canonical(key: Any) -> Any:
    # keys that compare equal must encode the same: 1 == 1.0 == True
    if key is None or isinstance(key, (str, bytes)):
        return key
    if isinstance(key, (bool, int)):
        return int(key)
    if isinstance(key, float):
        return int(key) if key.is_integer() else key
    if isinstance(key, tuple):
        return tuple(_canonical(k) for k in key)
    raise TypeError(
        f"No default hash for {type(key).__name__} keys, pass hash_func to RingMap"
    )


def default_hash(key: Any) -> int:
    """
    Signed 32-bit MurmurHash3 of the key.

    str and bytes are hashed as-is. None, numbers and tuples of those are
    hashed through the repr() of a canonical form, so keys that compare equal
    hash equal. Other key types raise TypeError.
    """
    if isinstance(key, (str, bytes)):
        return mmh3.hash(key)
    return mmh3.hash(repr(_canonical(key)))


def fold_hash(h: int) -> int:
    """
    Move a signed 32-bit hash into the positive window [0, POSITIVE_HASH_WINDOW].
    """
    if not INT32_MIN <= h <= INT32_MAX:
        raise ValueError(f"Hash {h} is outside the signed 32-bit range")
    if h == INT32_MIN:
        return INT32_MAX + (INT32_MAX + 1)
    if h < 0:
        return INT32_MAX + abs(h)
    return h


def angle_of_hash(h: int) -> float:
    angle = (fold_hash(h) / POSITIVE_HASH_WINDOW) * FULL_CIRCLE
    # INT32_MIN folds onto the top of the window; 360 is 0 on the circle.
    # Same owner either way since no vnode is ever placed at exactly 0.0
    if angle >= FULL_CIRCLE:
        return 0.0
    return angle


class AngleMapper:
    """
    Maps keys to ring angles through an injectable hash function.
    """

    def __init__(self, hash_func: HashFunc = default_hash):
        self.hash = hash_func

    def angle_of(self, key: Any) -> float:
        return angle_of_hash(self.hash(key))

    def __call__(self, key: Any) -> float:
        return self.angle_of(key)
