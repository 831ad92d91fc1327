"""Transcendental operations (sqrt log exp sin etc.) on kernel values,
implemented with GMP/MPFR as the high precision backend and numpy's IEEE
double as the low precision one.
"""


import math

import gmpy2 as gmp
import numpy as np

from . import utils
from . import digital
from . import conversion
from .ops import OP


# Newton-Raphson square roots give up after this many steps
NEWTON_MAX_ITER = 50


def digits_for_bits(prec):
    """Decimal digits carried by prec bits of binary precision."""
    return int(prec * math.log10(2)) + 1


def _context(prec):
    return gmp.context(
        precision=prec,
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        # domain errors give NaN and infinities, never exceptions
        trap_underflow=False,
        trap_overflow=False,
        trap_inexact=False,
        trap_invalid=False,
        trap_erange=False,
        trap_divzero=False,
        round=gmp.RoundToNearest,
    )


def value_to_mpfr(v):
    """Round a kernel value to an mpfr in the current context."""
    if v.is_nan():
        return gmp.mpfr('nan')
    elif v.kind == digital.Kind.POSITIVE_INFINITY:
        return gmp.mpfr('inf')
    elif v.kind == digital.Kind.NEGATIVE_INFINITY:
        return gmp.mpfr('-inf')
    elif v.kind == digital.Kind.NEGATIVE_ZERO:
        return gmp.mpfr('-0')
    else:
        return gmp.mpfr(v.to_mpq())


def mpfr_to_value(x, digits):
    """Convert an mpfr to a kernel value, keeping at most digits significant digits."""
    if gmp.is_nan(x):
        return digital.NAN
    elif gmp.is_infinite(x):
        if gmp.is_signed(x):
            return digital.NEGATIVE_INFINITY
        else:
            return digital.POSITIVE_INFINITY
    elif gmp.is_zero(x):
        if gmp.is_signed(x):
            return digital.NEGATIVE_ZERO
        else:
            return digital.ZERO

    # x == 0.ddddd * 10**exp
    s, exp, _ = x.digits(10, digits)
    m = utils.from_digits(s)
    ndigits = len(s.lstrip('-'))
    return digital.decimal_or_big(m, ndigits - exp)


mpfr_ops = {
    OP.sqrt: gmp.sqrt,
    OP.exp: gmp.exp,
    OP.log: gmp.log,
    OP.log2: gmp.log2,
    OP.log10: gmp.log10,
    OP.sin: gmp.sin,
    OP.cos: gmp.cos,
    OP.tan: gmp.tan,
    OP.asin: gmp.asin,
    OP.acos: gmp.acos,
    OP.atan: gmp.atan,
    OP.atan2: gmp.atan2,
    OP.pow: lambda x, y: x ** y,
}

def compute(opcode, *args, prec=256):
    """Compute op(*args) with prec bits of precision, rounded to nearest.
    Arguments are kernel values; the special ones (NaN, infinities, -0) are
    passed through to MPFR, which follows IEEE 754 for them.
    The result is a kernel value carrying digits_for_bits(prec) significant digits.
    """
    op = mpfr_ops[opcode]
    with _context(prec):
        inputs = [value_to_mpfr(arg) for arg in args]
        result = op(*inputs)
    return mpfr_to_value(result, digits_for_bits(prec))


np_ops = {
    OP.sqrt: np.sqrt,
    OP.exp: np.exp,
    OP.log: np.log,
    OP.log2: np.log2,
    OP.log10: np.log10,
    OP.sin: np.sin,
    OP.cos: np.cos,
    OP.tan: np.tan,
    OP.asin: np.arcsin,
    OP.acos: np.arccos,
    OP.atan: np.arctan,
    OP.atan2: np.arctan2,
    OP.pow: np.power,
}

def compute_float(opcode, *args):
    """Compute op(*args) in IEEE 754 double precision with numpy."""
    op = np_ops[opcode]
    inputs = [np.float64(conversion.value_to_float(arg)) for arg in args]
    with np.errstate(all='ignore'):
        result = op(*inputs)
    return conversion.float_to_value(np.float64(result))


constant_exprs = {
    'E' : lambda: gmp.exp(1),
    'PI' : gmp.const_pi,
}

float_constants = {
    'E' : np.e,
    'PI' : np.pi,
}

def compute_constant(name, prec=256):
    """A named constant at prec bits, or as a double when prec is 0."""
    if prec <= 0:
        try:
            return conversion.float_to_value(np.float64(float_constants[name]))
        except KeyError as e:
            raise ValueError('unknown constant {}'.format(repr(e.args[0])))

    with _context(prec):
        try:
            result = constant_exprs[name]()
        except KeyError as e:
            raise ValueError('unknown constant {}'.format(repr(e.args[0])))

    return mpfr_to_value(result, digits_for_bits(prec))


def newton_sqrt(x, digits, max_iter=NEWTON_MAX_ITER):
    """Square root of a positive mpq by integer Newton-Raphson, truncated to
    about digits significant digits. Returns (m, scale) with the root close
    to m * 10**-scale.
    """
    num, den = int(x.numerator), int(x.denominator)
    e = utils.decimal_exponent(num, den)
    scale = digits - 1 - e // 2

    # N = x * 10**(2 * scale), so that sqrt(N) = sqrt(x) * 10**scale
    if scale >= 0:
        n = num * 10**(2 * scale) // den
    else:
        n = num // (den * 10**(-2 * scale))
    if n == 0:
        return 0, 0

    # start above the root: the iteration then decreases monotonically
    y = 10**((utils.num_digits(n) + 1) // 2)
    for _ in range(max_iter):
        z = (y + n // y) // 2
        if z >= y:
            break
        y = z
    return y, scale
