"""Math library for Numbers.

Every function first settles the JavaScript special cases (NaN, the
infinities and -0) from a table, then evaluates finite operands. Rounding
functions are exact and clear the approximation tag; transcendentals are
evaluated with MPFR at the thread's precision, or in IEEE double when high
precision is disabled, and tag their results TRANSCENDENTAL.
"""

import builtins
import logging
import math

import gmpy2 as gmp

from ..core import utils
from ..core import digital
from ..core import bridge
from ..core import gmpmath
from ..core.ops import Kind, Apprx, OP, strongest
from . import evalctx
from . import number


logger = logging.getLogger(__name__)

# significant digits of the Newton-Raphson square root used without MPFR
FALLBACK_SQRT_DIGITS = 28


def _evaluate(opcode, *args):
    """Run a transcendental on finite or special operands and tag the result."""
    ctx = evalctx.get_ctx()
    prec = evalctx.get_default_precision()
    values = [arg.value for arg in args]
    if prec > 0:
        value = gmpmath.compute(opcode, *values, prec=prec)
    else:
        value = gmpmath.compute_float(opcode, *values)
    return number.Number._finish(value, Apprx.TRANSCENDENTAL, ctx)

def _integer(n, negative, apprx=None):
    """Wrap an exact integer result, keeping the sign of a zero."""
    if n == 0:
        if negative:
            return number.NEGATIVE_ZERO
        return number.ZERO
    value, _ = bridge.exact_value(n, 1, evalctx.get_ctx())
    return number.Number._make(value, apprx)

def _magnitude_vs_one(v):
    """-1, 0 or 1 as |v| is below, at or above one."""
    if v.is_inf():
        return 1
    x = builtins.abs(v.to_mpq())
    return (x > 1) - (x < 1)

def _as_integer(v):
    """The exact integer value of a finite real v, or None."""
    if v.kind == Kind.NEGATIVE_ZERO:
        return 0
    if not v.is_finite_real() or not v.is_integer():
        return None
    x = v.to_mpq()
    return int(x.numerator) // int(x.denominator)


# exact functions

def abs(x):
    v = x.value
    if v.is_nan():
        return x
    elif v.is_inf():
        return number.POSITIVE_INFINITY
    elif v.kind == Kind.NEGATIVE_ZERO:
        return number.ZERO
    elif v.sign() < 0:
        return x.neg()
    else:
        return x

def _round_integral(x, rounder):
    v = x.value
    if not v.is_finite_real():
        return x
    q = v.to_mpq()
    n = rounder(int(q.numerator), int(q.denominator))
    return _integer(n, v.sign() < 0)

def floor(x):
    return _round_integral(x, lambda n, d: n // d)

def ceil(x):
    return _round_integral(x, lambda n, d: -(-n // d))

def trunc(x):
    return _round_integral(x, utils.trunc_div)

def round(x):
    """Math.round: floor(x + 1/2), so halves go toward +Infinity (-3.5 gives -3)."""
    return _round_integral(x, lambda n, d: (2 * n + d) // (2 * d))

def round_dp(x, dp):
    """Round to dp decimal places, ties to even. The result is exact."""
    dp = int(dp)
    if dp < 0:
        raise ValueError('decimal places must be non-negative, got {}'.format(repr(dp)))
    v = x.value
    if not v.is_finite_real():
        return x
    q = v.to_mpq()
    m = utils.round_half_even(int(q.numerator) * 10**dp, int(q.denominator))
    if m == 0:
        return _integer(0, v.sign() < 0)
    ctx = evalctx.get_ctx()
    return number.Number._finish(digital.decimal_or_big(m, dp), None, ctx)


# roots and powers

def sqrt(x):
    v = x.value
    if v.is_nan() or v.kind == Kind.NEGATIVE_INFINITY:
        return number.NAN
    elif v.kind == Kind.POSITIVE_INFINITY:
        return x
    elif v.is_zero():
        # sqrt(-0) is +0 here
        return number.ZERO
    elif v.sign() < 0:
        return number.NAN

    ctx = evalctx.get_ctx()
    q = v.to_mpq()
    num, den = q.numerator, q.denominator
    if gmp.is_square(num) and gmp.is_square(den):
        value, lossy = bridge.exact_value(int(gmp.isqrt(num)), int(gmp.isqrt(den)), ctx)
        apprx = x.apprx
        if lossy:
            apprx = strongest(apprx, Apprx.RATIONAL_APPROXIMATION)
        return number.Number._finish(value, apprx, ctx)

    if evalctx.get_default_precision() > 0:
        return _evaluate(OP.sqrt, x)
    m, scale = gmpmath.newton_sqrt(q, FALLBACK_SQRT_DIGITS)
    return number.Number._finish(digital.decimal_or_big(m, scale), Apprx.TRANSCENDENTAL, ctx)

def _power_exact(b, n):
    """b**n for an integer n, by repeated squaring with exact multiplication."""
    result = number.ONE
    base = b
    k = builtins.abs(n)
    while k:
        if k & 1:
            result = result.mul(base)
        k >>= 1
        if k:
            base = base.mul(base)
    if n < 0:
        result = number.ONE.div(result)
    return result

def _exact_power_fits(bv, n, ctx):
    """True if bv**n is small enough to compute exactly: the estimated digits of its
    numerator, denominator and decimal significand stay within max_digits.
    """
    if ctx.max_digits is None:
        return builtins.abs(n) <= ctx.max_exact_exponent
    q = bv.to_mpq()
    num, den = builtins.abs(int(q.numerator)), int(q.denominator)
    if n < 0:
        num, den = den, num
    size = max(num, den)
    d = bridge.exact_decimal(num, den)
    if d is not None:
        size = max(size, d[0])
    return builtins.abs(n) * math.log10(size) <= ctx.max_digits

def pow(b, e):
    bv, ev = b.value, e.value

    # x**0 and x**-0 are 1, even for NaN
    if ev.is_zero():
        return number.ONE
    if bv.is_nan() or ev.is_nan():
        return number.NAN

    if ev.is_inf():
        mag = _magnitude_vs_one(bv)
        if mag == 0:
            return number.ONE
        elif (mag > 0) == (ev.kind == Kind.POSITIVE_INFINITY):
            return number.POSITIVE_INFINITY
        else:
            return number.ZERO

    n = _as_integer(ev)
    odd = n is not None and n & 1 == 1
    positive = ev.sign() > 0

    if bv.is_inf():
        negative = bv.kind == Kind.NEGATIVE_INFINITY and odd
        if positive:
            return number.NEGATIVE_INFINITY if negative else number.POSITIVE_INFINITY
        else:
            return number.NEGATIVE_ZERO if negative else number.ZERO

    if bv.kind == Kind.NEGATIVE_ZERO:
        if positive:
            return number.NEGATIVE_ZERO if odd else number.ZERO
        else:
            return number.NEGATIVE_INFINITY
    if bv.is_zero():
        return number.ZERO if positive else number.POSITIVE_INFINITY

    ctx = evalctx.get_ctx()
    if n is not None and _exact_power_fits(bv, n, ctx):
        result = _power_exact(b, n)
        if e.apprx is not None and not result.value.is_special():
            result = number.Number._make(result.value, strongest(result.apprx, e.apprx))
        return result

    if bv.sign() < 0 and n is None:
        return number.NAN
    if ev.kind == Kind.RATIONAL and ev.p == 1 and ev.q == 2:
        result = sqrt(b)
        return number.Number._make(result.value, strongest(result.apprx, e.apprx))

    logger.debug('pow with exponent %s evaluated inexactly', ev)
    return _evaluate(OP.pow, b, e)


# exponentials and logarithms

def exp(x):
    v = x.value
    if v.is_nan():
        return x
    elif v.kind == Kind.POSITIVE_INFINITY:
        return number.POSITIVE_INFINITY
    elif v.kind == Kind.NEGATIVE_INFINITY:
        return number.ZERO
    return _evaluate(OP.exp, x)

def _logarithm(opcode, x):
    v = x.value
    if v.is_nan():
        return x
    elif v.is_zero():
        return number.NEGATIVE_INFINITY
    elif v.sign() < 0:
        return number.NAN
    elif v.kind == Kind.POSITIVE_INFINITY:
        return number.POSITIVE_INFINITY
    return _evaluate(opcode, x)

def log(x):
    """Natural logarithm."""
    return _logarithm(OP.log, x)

def log2(x):
    return _logarithm(OP.log2, x)

def log10(x):
    return _logarithm(OP.log10, x)


# trigonometry

def _periodic(opcode, x, keeps_negative_zero):
    v = x.value
    if v.is_nan() or v.is_inf():
        return number.NAN
    elif v.kind == Kind.NEGATIVE_ZERO and keeps_negative_zero:
        return x
    return _evaluate(opcode, x)

def sin(x):
    return _periodic(OP.sin, x, True)

def cos(x):
    return _periodic(OP.cos, x, False)

def tan(x):
    return _periodic(OP.tan, x, True)

def _inverse(opcode, x, keeps_negative_zero):
    v = x.value
    if v.is_nan() or _magnitude_vs_one(v) > 0:
        return number.NAN
    elif v.kind == Kind.NEGATIVE_ZERO and keeps_negative_zero:
        return x
    return _evaluate(opcode, x)

def asin(x):
    return _inverse(OP.asin, x, True)

def acos(x):
    return _inverse(OP.acos, x, False)

def atan(x):
    """atan(+-Infinity) is +-pi/2."""
    v = x.value
    if v.is_nan():
        return x
    elif v.kind == Kind.NEGATIVE_ZERO:
        return x
    return _evaluate(OP.atan, x)

def atan2(y, x):
    """Angle of the point (x, y). Signed zeros and infinities follow IEEE 754."""
    if y.value.is_nan() or x.value.is_nan():
        return number.NAN
    return _evaluate(OP.atan2, y, x)


# constants

def _constant(name):
    ctx = evalctx.get_ctx()
    value = gmpmath.compute_constant(name, prec=evalctx.get_default_precision())
    return number.Number._finish(value, Apprx.TRANSCENDENTAL, ctx)

def pi():
    return _constant('PI')

def e():
    return _constant('E')
