import secrets
from typing import Optional, Tuple

from elgamal_client.crypto.modular import mod_mul, mod_pow


def public_value(p: int, a: int, n: int) -> int:
    return mod_pow(a, n, p)


def encrypt(p: int, a: int, public_key: int, m: int, k: Optional[int] = None) -> Tuple[int, int]:
    """Encrypt m under public_key = a^n mod p. Returns (y1, y2)."""
    if not 0 <= m < p:
        raise ValueError("message out of range")
    if k is None:
        k = secrets.randbelow(p - 2) + 1
    y1 = mod_pow(a, k, p)
    y2 = mod_mul(m % p, mod_pow(public_key, k, p), p)
    return y1, y2


def decrypt(p: int, n: int, y1: int, y2: int) -> int:
    """Recover m = y2 * y1^(p-1-n) mod p."""
    exponent = p - 1 - n
    return mod_mul(y2, mod_pow(y1, exponent, p), p)
