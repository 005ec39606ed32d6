U64_MAX = (1 << 64) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


def mod_mul(a: int, b: int, mod: int) -> int:
    """Return (a * b) % mod; the product is never truncated before reducing."""
    return (a * b) % mod


def mod_pow(base: int, exp: int, mod: int) -> int:
    """Square-and-multiply over the bits of exp, least significant first."""
    result = 1 % mod
    base %= mod
    while exp > 0:
        if exp & 1:
            result = mod_mul(result, base, mod)
        base = mod_mul(base, base, mod)
        exp >>= 1
    return result


def to_int64(value: int) -> int:
    """Reinterpret the low 64 bits of value as a two's-complement signed integer."""
    value &= U64_MAX
    if value > I64_MAX:
        value -= 1 << 64
    return value
