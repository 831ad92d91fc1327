"""Conversions between machine floats (float, np.floatXX) and the kernel's values."""


import sys
import logging

import numpy as np
import gmpy2 as gmp

from . import utils
from . import digital
from .ops import Kind


logger = logging.getLogger(__name__)


# float16 : w = 5,  p = 11
# float32 : w = 8,  p = 24
# float64 : w = 11, p = 53
float_fields = {
    np.float16: (5, 10),
    np.float32: (8, 23),
    np.float64: (11, 52),
}


def np_byteorder(ftype):
    """Converts from numpy byteorder conventions for a floating point datatype
    to sys.byteorder 'big' or 'little'.
    """
    bo = np.dtype(ftype).byteorder
    if bo == '=':
        return sys.byteorder
    elif bo == '<':
        return 'little'
    elif bo == '>':
        return 'big'
    else:
        raise ValueError('unknown numpy byteorder {} for dtype {}'.format(repr(bo), repr(ftype)))


def float_fields_of(f):
    """Split a python or numpy float into its raw sign, exponent and significand fields.
    Returns (S, E, C, w, pbits).
    """
    if isinstance(f, float) and not isinstance(f, np.floating):
        f = np.float64(f)
    try:
        w, pbits = float_fields[type(f)]
    except KeyError:
        raise TypeError('expected float or np.float{{16,32,64}}, got {}'.format(repr(type(f))))

    bits = int.from_bytes(f.tobytes(), np_byteorder(type(f)))

    S = bits >> (w + pbits) & utils.bitmask(1)
    E = bits >> (pbits) & utils.bitmask(w)
    C = bits & utils.bitmask(pbits)

    return S, E, C, w, pbits


def float_to_mantissa_exp(f):
    """Converts a python or numpy float into universal m, exp representation:
    f = m * 2**e. If the float does not represent a real number (i.e. it is inf
    or NaN) this will raise an exception.
    """
    S, E, C, w, pbits = float_fields_of(f)
    emax = (1 << (w - 1)) - 1
    e = E - emax

    if E == 0:
        # subnormal
        m = C
        exp = -emax - pbits + 1
    elif e <= emax:
        # normal
        m = C | (1 << pbits)
        exp = e - pbits
    else:
        # nonreal
        raise ValueError('nonfinite value {}'.format(repr(f)))

    if S:
        m = -m
    return m, exp


def float_to_value(f):
    """Converts a python or numpy float into a kernel value.
    NaN, the infinities and -0.0 map onto the special values. Every other float
    is a dyadic rational m * 2**exp: it becomes a Rational when both halves fit
    in 64 bits, otherwise the Decimal or BigDecimal of exactly the same value.
    """
    S, E, C, w, pbits = float_fields_of(f)
    if E == utils.bitmask(w):
        if C != 0:
            return digital.NAN
        elif S:
            return digital.NEGATIVE_INFINITY
        else:
            return digital.POSITIVE_INFINITY
    elif E == 0 and C == 0:
        if S:
            return digital.NEGATIVE_ZERO
        else:
            return digital.ZERO

    m, exp = float_to_mantissa_exp(f)
    if exp >= 0:
        r = digital.rational_or_none(m << exp, 1)
    else:
        r = digital.rational_or_none(m, 1 << -exp)
    if r is not None:
        return r

    # too wide for a 64-bit rational: every double is a terminating decimal,
    # m * 2**-k == m * 5**k * 10**-k
    if exp >= 0:
        value = digital.decimal_or_big(m << exp, 0)
    else:
        value = digital.decimal_or_big(m * 5**(-exp), -exp)
    logger.debug('float %r too wide for a rational, kept as a %s', f, type(value).__name__)
    return value


def mpq_to_float(x):
    """Nearest double to an exact rational, with IEEE overflow to infinity and subnormals."""
    with gmp.context(
            precision=53,
            emin=-1073,
            emax=1024,
            subnormalize=True,
            trap_underflow=False,
            trap_overflow=False,
            round=gmp.RoundToNearest,
    ):
        return float(gmp.mpfr(x))


def value_to_float(v):
    """Nearest python float to a kernel value. Never raises."""
    if v.is_nan():
        return float('nan')
    elif v.kind == Kind.POSITIVE_INFINITY:
        return float('inf')
    elif v.kind == Kind.NEGATIVE_INFINITY:
        return float('-inf')
    elif v.kind == Kind.NEGATIVE_ZERO:
        return -0.0
    else:
        return mpq_to_float(v.to_mpq())
