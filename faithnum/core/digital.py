"""Universal representation for the values behind a Number (in base 10)"""

import typing

import gmpy2 as gmp

from . import utils
from .ops import Kind


# fixed-width decimals: 96-bit unsigned significand, scale 0 to 28
DECIMAL_BITS = 96
DECIMAL_MAX_SCALE = 28
DECIMAL_MAX_C = utils.bitmask(DECIMAL_BITS)
DECIMAL_MAX_DIGITS = 29

def fits_decimal(c: int, scale: int) -> bool:
    """True iff the magnitude c * 10**-scale can be held by a Decimal.
    c must already be normalized (no trailing zeros unless scale is 0).
    """
    if scale < 0:
        if utils.num_digits(c) - scale > DECIMAL_MAX_DIGITS:
            return False
        c = c * 10**(-scale)
        scale = 0
    return c <= DECIMAL_MAX_C and scale <= DECIMAL_MAX_SCALE


class Value(object):
    """Base class of the kernel's tagged values. Values are immutable."""

    kind = None

    def is_nan(self):
        return self.kind == Kind.NAN

    def is_inf(self):
        return self.kind == Kind.POSITIVE_INFINITY or self.kind == Kind.NEGATIVE_INFINITY

    def is_special(self):
        return self.kind >= Kind.NEGATIVE_ZERO

    def is_finite(self):
        """True for every real value, including -0."""
        return not (self.is_nan() or self.is_inf())

    def is_finite_real(self):
        """True for the Rational, Decimal and BigDecimal kinds."""
        return self.kind <= Kind.BIGDECIMAL

    def is_zero(self):
        return False

    def to_mpq(self):
        raise ValueError('{} has no exact rational value'.format(repr(self)))


class Special(Value):
    """NaN, the infinities and negative zero. There is one instance of each."""

    def __init__(self, kind):
        if kind < Kind.NEGATIVE_ZERO:
            raise ValueError('not a special kind: {}'.format(repr(kind)))
        self.kind = kind

    @property
    def negative(self):
        return self.kind == Kind.NEGATIVE_ZERO or self.kind == Kind.NEGATIVE_INFINITY

    def is_zero(self):
        return self.kind == Kind.NEGATIVE_ZERO

    def sign(self):
        if self.kind == Kind.POSITIVE_INFINITY:
            return 1
        elif self.kind == Kind.NEGATIVE_INFINITY:
            return -1
        else:
            return 0

    def to_mpq(self):
        if self.kind == Kind.NEGATIVE_ZERO:
            return gmp.mpq(0)
        else:
            return super().to_mpq()

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, self.kind.name)

    def __eq__(self, other):
        return isinstance(other, Special) and self.kind == other.kind

    def __hash__(self):
        return hash((Special, int(self.kind)))


NAN = Special(Kind.NAN)
POSITIVE_INFINITY = Special(Kind.POSITIVE_INFINITY)
NEGATIVE_INFINITY = Special(Kind.NEGATIVE_INFINITY)
NEGATIVE_ZERO = Special(Kind.NEGATIVE_ZERO)


class Rational(Value):
    """Exact p/q with 64-bit numerator and denominator, q > 0, gcd(|p|, q) = 1."""

    kind = Kind.RATIONAL

    _p : int = 0
    _q : int = 1
    _nonterminating : bool = False

    @property
    def p(self):
        """Signed 64-bit numerator, in lowest terms."""
        return self._p

    @property
    def q(self):
        """Positive 64-bit denominator, in lowest terms."""
        return self._q

    @property
    def nonterminating(self):
        """True iff q has a prime factor other than 2 or 5,
        so p/q has no finite decimal expansion.
        """
        return self._nonterminating

    @property
    def negative(self):
        return self._p < 0

    def __init__(self, p, q=1):
        p = int(p)
        q = int(q)
        if q == 0:
            raise ZeroDivisionError('Rational with zero denominator')
        if q < 0:
            p, q = -p, -q
        g = int(gmp.gcd(p, q))
        if g > 1:
            p //= g
            q //= g
        if not (utils.fits_i64(p) and q <= utils.I64_MAX):
            raise OverflowError('{}-bit numerator over {}-bit denominator does not fit a 64-bit rational'
                                .format(p.bit_length() + 1, q.bit_length()))
        self._p = p
        self._q = q
        self._nonterminating = not utils.is_terminating(q)

    def is_zero(self):
        return self._p == 0

    def is_integer(self):
        return self._q == 1

    def sign(self):
        return (self._p > 0) - (self._p < 0)

    def to_mpq(self):
        return gmp.mpq(self._p, self._q)

    def __repr__(self):
        return '{}(p={}, q={})'.format(type(self).__name__, repr(self._p), repr(self._q))

    def __str__(self):
        return '{:d}/{:d}'.format(self._p, self._q)

    def __eq__(self, other):
        return isinstance(other, Rational) and self._p == other._p and self._q == other._q

    def __hash__(self):
        return hash((Rational, self._p, self._q))


class DecimalValue(Value):
    """Shared machinery for the base-10 kinds.
    The value is exactly (-1)**negative * c * 10**-scale, kept normalized:
    c has no trailing zeros unless the kind forbids lowering the scale further.
    """

    # for decimals the magnitude is exactly _c * (10 ** -_scale)
    _c : int = 0
    _scale : int = 0

    # the sign is stored separately
    _negative : bool = False

    # may the scale go below zero?
    _negative_scale_ok = True

    @property
    def c(self):
        """Unsigned integer significand.
        The magnitude of the value is exactly (c * 10**-scale).
        """
        return self._c

    @property
    def scale(self):
        """Number of decimal digits after the point.
        The magnitude of the value is exactly (c * 10**-scale).
        """
        return self._scale

    @property
    def exp(self):
        """Signed base-10 exponent, the negation of the scale."""
        return -self._scale

    @property
    def m(self):
        """Signed integer significand. The value is exactly m * 10**-scale."""
        if self._negative:
            return -self._c
        else:
            return self._c

    @property
    def negative(self):
        return self._negative

    @property
    def e(self):
        """Base-10 exponent of the leading digit, so that 10**e <= |value| < 10**(e+1).
        Undefined (None) for zero.
        """
        if self._c == 0:
            return None
        return utils.num_digits(self._c) - 1 - self._scale

    def __init__(self, m, scale=0):
        m = int(m)
        scale = int(scale)
        negative = m < 0
        c = -m if negative else m

        if c == 0:
            negative = False
            scale = 0
        else:
            c, k = utils.strip_factor(c, 10)
            scale -= k
            if scale < 0 and not self._negative_scale_ok:
                self._check(c, scale)
                c *= 10**(-scale)
                scale = 0

        self._check(c, scale)
        self._c = c
        self._scale = scale
        self._negative = negative

    def _check(self, c, scale):
        pass

    def is_zero(self):
        return self._c == 0

    def is_integer(self):
        return self._scale <= 0

    def sign(self):
        if self._c == 0:
            return 0
        elif self._negative:
            return -1
        else:
            return 1

    def to_mpq(self):
        if self._scale >= 0:
            return gmp.mpq(self.m, 10**self._scale)
        else:
            return gmp.mpq(self.m * 10**(-self._scale))

    def __repr__(self):
        return '{}(negative={}, c={}, scale={})'.format(
            type(self).__name__, repr(self._negative), utils.digits(self._c), repr(self._scale),
        )

    def __str__(self):
        return '{:s} {:s} * 10**{:d}'.format(
            '-' if self._negative else '+',
            utils.digits(self._c),
            -self._scale,
        )

    def __eq__(self, other):
        return (type(self) is type(other)
                and self._c == other._c
                and self._scale == other._scale
                and self._negative == other._negative)

    def __hash__(self):
        return hash((type(self), self._negative, self._c, self._scale))


class Decimal(DecimalValue):
    """Fixed-width decimal: 96-bit significand, scale in [0, 28]."""

    kind = Kind.DECIMAL
    _negative_scale_ok = False

    def _check(self, c, scale):
        if not fits_decimal(c, scale):
            raise OverflowError('{}-digit significand at scale {} does not fit a {}-bit decimal'
                                .format(utils.num_digits(c), scale, DECIMAL_BITS))


class BigDecimal(DecimalValue):
    """Arbitrary-precision decimal: unbounded significand, any integer scale."""

    kind = Kind.BIGDECIMAL


ZERO = Decimal(0)
ONE = Rational(1)


def decimal_or_big(m: int, scale: int, narrow: bool = True) -> DecimalValue:
    """Build a Decimal when narrow is set and the value fits, else a BigDecimal."""
    if narrow:
        try:
            return Decimal(m, scale)
        except OverflowError:
            pass
    return BigDecimal(m, scale)

def rational_or_none(num: int, den: int) -> typing.Optional[Rational]:
    """Build a Rational for num/den, or None if it doesn't fit 64 bits."""
    try:
        return Rational(num, den)
    except OverflowError:
        return None
