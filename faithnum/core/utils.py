"""General utilities, such as exception classes."""

import typing

import gmpy2 as gmp


# faithnum-specific exceptions

class NumberError(Exception):
    """Base faithnum error."""

class ParseError(NumberError, ValueError):
    """A string could not be turned into a number.
    The reason is one of 'empty', 'invalid_character', 'multiple_separators',
    'mismatched_format', 'overflow' or 'syntax'.
    """

    def __init__(self, message, reason='syntax', pos=None, ch=None):
        super().__init__(message)
        self.reason = reason
        self.pos = pos
        self.ch = ch

class NotRepresentableError(NumberError, ValueError):
    """Narrowing conversion that cannot honour the target's range,
    such as NaN to a machine integer.
    """


# integer widths

I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1
U32_MAX = (1 << 32) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U64_MAX = (1 << 64) - 1


# Useful things

def bitmask(n: int) -> int:
    """Produces a bitmask of n 1s if n is positive, or n 0s if n is negative."""
    if n >= 0:
        return (1 << n) - 1
    else:
        return -1 << -n

def maskbits(x: int, n:int) -> int:
    """Mask x & bitmask(n)"""
    if n >= 0:
        return x & ((1 << n) - 1)
    else:
        return x & (-1 << -n)

def wrap_signed(x: int, n: int) -> int:
    """Reduce x modulo 2**n and reinterpret as an n-bit two's complement integer."""
    x = maskbits(x, n)
    if x >> (n - 1):
        return x - (1 << n)
    else:
        return x

def fits_i64(x: int) -> bool:
    return I64_MIN <= x <= I64_MAX

def trunc_div(n: int, d: int) -> int:
    """Integer quotient of n / d, truncated toward zero."""
    q = abs(n) // abs(d)
    if (n < 0) != (d < 0):
        return -q
    else:
        return q

def round_half_even(n: int, d: int) -> int:
    """Integer nearest to n / d, ties to even. d must be positive."""
    q, r = divmod(n, d)
    twice = 2 * r
    if twice > d or (twice == d and q & 1):
        q += 1
    return q

def strip_factor(x: int, f: int) -> typing.Tuple[int, int]:
    """Remove every factor f from x; return (x / f**k, k). x must be nonzero."""
    y, k = gmp.remove(x, f)
    return int(y), int(k)

def is_terminating(q: int) -> bool:
    """True iff 1/q has a finite decimal expansion."""
    q, _ = strip_factor(q, 2)
    q, _ = strip_factor(q, 5)
    return q == 1

def num_digits(x: int) -> int:
    """Number of decimal digits in |x|, for integers of any length. Zero has one digit."""
    x = gmp.mpz(abs(x))
    n = int(x.num_digits(10))
    # num_digits can overestimate by one
    if n > 1 and x < gmp.mpz(10)**(n - 1):
        n -= 1
    return n

def digits(x: int) -> str:
    """Decimal text of x. Unlike str(), takes integers of any length."""
    return gmp.digits(gmp.mpz(x))

def from_digits(s: str) -> int:
    """Inverse of digits(), for strings of decimal digits of any length."""
    return int(gmp.mpz(s))

def decimal_exponent(num: int, den: int) -> int:
    """floor(log10(num / den)) for positive num and den."""
    e = num_digits(num) - num_digits(den)
    if e >= 0:
        if num < den * 10**e:
            e -= 1
    else:
        if num * 10**(-e) < den:
            e -= 1
    return e
