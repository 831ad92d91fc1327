"""Kind, approximation and operation codes, shared by the kernel and the math library."""

from enum import IntEnum, unique


@unique
class Kind(IntEnum):
    RATIONAL = 0
    DECIMAL = 1
    BIGDECIMAL = 2
    NEGATIVE_ZERO = 3
    POSITIVE_INFINITY = 4
    NEGATIVE_INFINITY = 5
    NAN = 6

kind_names = {
    Kind.RATIONAL: 'Rational',
    Kind.DECIMAL: 'Decimal',
    Kind.BIGDECIMAL: 'BigDecimal',
    Kind.NEGATIVE_ZERO: 'NegativeZero',
    Kind.POSITIVE_INFINITY: 'PositiveInfinity',
    Kind.NEGATIVE_INFINITY: 'NegativeInfinity',
    Kind.NAN: 'NaN',
}


@unique
class Apprx(IntEnum):
    """Approximation tags, ordered by strength. An exact value has no tag (None)."""
    RATIONAL_APPROXIMATION = 1
    TRANSCENDENTAL = 2

apprx_names = {
    Apprx.RATIONAL_APPROXIMATION: 'rational_approximation',
    Apprx.TRANSCENDENTAL: 'transcendental',
}

def strongest(*tags):
    """Strongest of several tags, with None < RATIONAL_APPROXIMATION < TRANSCENDENTAL."""
    result = None
    for tag in tags:
        if tag is not None and (result is None or tag > result):
            result = tag
    return result


@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    rem = 4
    sqrt = 5
    exp = 6
    log = 7
    log2 = 8
    log10 = 9
    sin = 10
    cos = 11
    tan = 12
    asin = 13
    acos = 14
    atan = 15
    atan2 = 16
    pow = 17
