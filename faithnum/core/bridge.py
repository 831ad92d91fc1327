"""Representation bridge: canonicalization, promotion and demotion between
the Rational, Decimal and BigDecimal kinds.

Arithmetic on finite values is attempted exactly first. When the exact result
does not fit a 64-bit Rational, the operands are brought into decimal form:
terminating rationals convert exactly, non-terminating ones are rounded to
ctx.division_digits significant digits, which makes the result lossy. After
every operation the caller demotes the result back down the lattice where
that loses nothing.
"""

import logging
import typing

import gmpy2 as gmp

from . import utils
from . import digital
from .ops import Kind, Apprx, OP


logger = logging.getLogger(__name__)

# continued fraction expansions stop after this many terms
CF_MAX_TERMS = 100


def canonicalize(v):
    """Every finite zero becomes Decimal(0)."""
    if v.is_finite_real() and v.is_zero():
        return digital.ZERO
    else:
        return v


# exact decimal forms

def exact_decimal(num: int, den: int) -> typing.Optional[typing.Tuple[int, int]]:
    """(m, scale) with num/den == m * 10**-scale, or None if num/den doesn't terminate.
    den must be positive.
    """
    rest, twos = utils.strip_factor(den, 2)
    rest, fives = utils.strip_factor(rest, 5)
    if rest != 1:
        return None
    k = max(twos, fives)
    return num * (10**k // den), k

def round_significant(num: int, den: int, digits: int) -> typing.Tuple[int, int]:
    """(m, scale) with m * 10**-scale the nearest value to num/den carrying
    at most digits significant digits, ties to even. den must be positive.
    """
    if num == 0:
        return 0, 0
    c = abs(num)
    e = utils.decimal_exponent(c, den)
    scale = digits - 1 - e
    if scale >= 0:
        m = utils.round_half_even(c * 10**scale, den)
    else:
        m = utils.round_half_even(c, den * 10**(-scale))
    if num < 0:
        m = -m
    return m, scale

def clip(m: int, scale: int, max_digits: int) -> typing.Tuple[int, int, bool]:
    """Round m * 10**-scale to max_digits significant digits if it has more.
    Returns (m, scale, clipped).
    """
    if max_digits is None or m == 0:
        return m, scale, False
    ndigits = utils.num_digits(m)
    if ndigits <= max_digits:
        return m, scale, False
    drop = ndigits - max_digits
    return utils.round_half_even(m, 10**drop), scale - drop, True


class DecimalForm(typing.NamedTuple):
    """An operand brought into decimal form for the decimal arithmetic path."""
    m: int
    scale: int
    # rounding happened on the way in
    lossy: bool
    # fits the fixed-width Decimal kind
    narrow: bool

def decimal_form(v, ctx) -> DecimalForm:
    if v.kind == Kind.RATIONAL:
        exact = exact_decimal(v.p, v.q)
        if exact is None:
            m, scale = round_significant(v.p, v.q, ctx.division_digits)
            return DecimalForm(m, scale, True, False)
        else:
            m, scale = exact
            d = digital.BigDecimal(m, scale)
            return DecimalForm(m, scale, False, digital.fits_decimal(d.c, d.scale))
    elif v.kind == Kind.DECIMAL:
        return DecimalForm(v.m, v.scale, False, True)
    elif v.kind == Kind.BIGDECIMAL:
        return DecimalForm(v.m, v.scale, False, False)
    else:
        raise ValueError('no decimal form for {}'.format(repr(v)))

def promote(v, ctx):
    """Move a finite value up to the narrowest decimal kind that holds it.
    Returns (value, lossy).
    """
    form = decimal_form(v, ctx)
    return digital.decimal_or_big(form.m, form.scale, form.narrow), form.lossy


# arithmetic in decimal form

def _align(a, b):
    scale = max(a.scale, b.scale)
    return a.m * 10**(scale - a.scale), b.m * 10**(scale - b.scale), scale

def _decimal_add(a, b, ctx):
    ma, mb, scale = _align(a, b)
    return ma + mb, scale, False

def _decimal_sub(a, b, ctx):
    ma, mb, scale = _align(a, b)
    return ma - mb, scale, False

def _decimal_mul(a, b, ctx):
    return a.m * b.m, a.scale + b.scale, False

def _decimal_div(a, b, ctx):
    # a.m * 10**-a.scale / (b.m * 10**-b.scale) == (a.m / b.m) * 10**(b.scale - a.scale)
    q = gmp.mpq(a.m, b.m)
    num, den = int(q.numerator), int(q.denominator)
    exact = exact_decimal(num, den)
    if exact is not None:
        m, k = exact
        return m, k + a.scale - b.scale, False
    shift = b.scale - a.scale
    if shift >= 0:
        num *= 10**shift
    else:
        den *= 10**(-shift)
    m, scale = round_significant(num, den, ctx.division_digits)
    return m, scale, True

def _decimal_rem(a, b, ctx):
    ma, mb, scale = _align(a, b)
    return ma - mb * utils.trunc_div(ma, mb), scale, False

decimal_ops = {
    OP.add: _decimal_add,
    OP.sub: _decimal_sub,
    OP.mul: _decimal_mul,
    OP.div: _decimal_div,
    OP.rem: _decimal_rem,
}


# exact rational arithmetic

def _mpq_rem(x, y):
    q = x / y
    t = utils.trunc_div(int(q.numerator), int(q.denominator))
    return x - y * t

mpq_ops = {
    OP.add: lambda x, y: x + y,
    OP.sub: lambda x, y: x - y,
    OP.mul: lambda x, y: x * y,
    OP.div: lambda x, y: x / y,
    OP.rem: _mpq_rem,
}


def compute(opcode, a, b, ctx):
    """Apply a binary arithmetic operation to two finite real values.
    The divisor of div and rem must be nonzero.
    Returns (value, lossy): lossy is True when a non-terminating operand or
    quotient had to be rounded, or the result was clipped.
    """
    exact = mpq_ops[opcode](a.to_mpq(), b.to_mpq())
    r = digital.rational_or_none(int(exact.numerator), int(exact.denominator))
    if r is not None:
        return canonicalize(r), False

    fa = decimal_form(a, ctx)
    fb = decimal_form(b, ctx)
    m, scale, rounded = decimal_ops[opcode](fa, fb, ctx)
    m, scale, clipped = clip(m, scale, ctx.max_digits)

    lossy = fa.lossy or fb.lossy or rounded or clipped
    narrow = fa.narrow and fb.narrow and not lossy
    result = canonicalize(digital.decimal_or_big(m, scale, narrow))
    logger.debug('%s overflowed 64-bit rationals: %s, lossy=%s',
                  opcode.name, type(result).__name__, lossy)
    return result, lossy


# demotion

def continued_fraction(num: int, den: int, max_den: int, tol) -> typing.Optional[typing.Tuple[int, int]]:
    """First convergent p/q of num/den with |num/den - p/q| <= tol,
    or None if none exists with q <= max_den. den must be positive.
    """
    x = gmp.mpq(abs(num), den)
    n, d = abs(num), den
    p0, q0, p1, q1 = 0, 1, 1, 0
    for _ in range(CF_MAX_TERMS):
        a, r = divmod(n, d)
        p0, q0, p1, q1 = p1, q1, a * p1 + p0, a * q1 + q0
        if q1 > max_den:
            return None
        if abs(x - gmp.mpq(p1, q1)) <= tol:
            if num < 0:
                return -p1, q1
            else:
                return p1, q1
        if r == 0:
            return None
        n, d = d, r
    return None

def reproduces(r, v, ctx) -> bool:
    """Does the rational r, expanded back into decimal form, give exactly v?"""
    if v.scale >= 0 and utils.round_half_even(r.p * 10**v.scale, r.q) == v.m:
        return True
    form = decimal_form(r, ctx)
    return digital.BigDecimal(form.m, form.scale) == digital.BigDecimal(v.m, v.scale)

def recover_rational(v, ctx):
    """Look for a small-denominator rational within a few units in the last place
    of the decimal v. Returns (Rational, exact) or None.
    """
    x = v.to_mpq()
    whole = utils.trunc_div(int(x.numerator), int(x.denominator))
    if abs(whole) > ctx.cf_magnitude_limit:
        logger.debug('not recovering a rational from %s: magnitude too large', v)
        return None

    tol = gmp.mpq(ctx.cf_tolerance_ulps, 10**max(v.scale, 0))
    pq = continued_fraction(int(x.numerator), int(x.denominator), ctx.cf_max_denominator, tol)
    if pq is None:
        return None
    r = digital.rational_or_none(*pq)
    if r is None or r.is_zero():
        return None
    exact = reproduces(r, v, ctx)
    logger.debug('recovered %s from %s, exact=%s', r, v, exact)
    return r, exact

def demote(v, apprx, ctx):
    """Move a decimal value down the lattice when that loses nothing.
    Returns (value, apprx).
    """
    if v.kind != Kind.DECIMAL and v.kind != Kind.BIGDECIMAL:
        return v, apprx
    if v.is_zero():
        return digital.ZERO, apprx

    # scale shift: m * 10**-scale as a reduced fraction
    x = v.to_mpq()
    r = digital.rational_or_none(int(x.numerator), int(x.denominator))
    if r is not None:
        return r, apprx

    if apprx == Apprx.RATIONAL_APPROXIMATION:
        recovered = recover_rational(v, ctx)
        if recovered is not None:
            r, exact = recovered
            if exact:
                return r, None
            else:
                return r, apprx

    if v.kind == Kind.BIGDECIMAL and digital.fits_decimal(v.c, v.scale):
        return digital.Decimal(v.m, v.scale), apprx

    return v, apprx


def exact_value(num: int, den: int, ctx):
    """The narrowest value equal to num/den: a Rational when it fits,
    else a Decimal or BigDecimal. Non-terminating fractions that don't fit a
    Rational are rounded to ctx.division_digits; the second result says so.
    """
    if den < 0:
        num, den = -num, -den
    r = digital.rational_or_none(num, den)
    if r is not None:
        return canonicalize(r), False
    exact = exact_decimal(num, den)
    if exact is not None:
        return canonicalize(digital.decimal_or_big(*exact)), False
    m, scale = round_significant(num, den, ctx.division_digits)
    return canonicalize(digital.BigDecimal(m, scale)), True
