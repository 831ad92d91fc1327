"""Faithful numbers: exact rational and decimal arithmetic wherever the result
can be held exactly, with JavaScript semantics for NaN, the infinities and -0.
"""

import sys
import fractions

import gmpy2 as gmp
import numpy as np

from ..core import utils
from ..core import digital
from ..core import bridge
from ..core import conversion
from ..core.ops import Kind, Apprx, OP, kind_names, strongest
from . import evalctx
from . import mathlib
from . import jsops
from . import display


_PyHASH_MODULUS = sys.hash_info.modulus
_PyHASH_INF = sys.hash_info.inf
_PyHASH_NAN = sys.hash_info.nan

def _rational_hash(p, q):
    """Python's numeric hash of p/q, so equal ints, floats and Fractions collide."""
    try:
        dinv = pow(q, -1, _PyHASH_MODULUS)
    except ValueError:
        # q is divisible by the modulus
        hash_ = _PyHASH_INF
    else:
        hash_ = hash(hash(abs(p)) * dinv)
    result = hash_ if p >= 0 else -hash_
    return -2 if result == -1 else result


class Number(object):
    """An immutable number: a kernel value plus an optional approximation tag."""

    _value = digital.ZERO
    _apprx = None

    # the internal state is not directly visible: expose it with properties

    @property
    def value(self):
        """The backing kernel value: Rational, Decimal, BigDecimal or a Special."""
        return self._value

    @property
    def apprx(self):
        """None for exact values, else Apprx.RATIONAL_APPROXIMATION
        or Apprx.TRANSCENDENTAL.
        """
        return self._apprx

    @property
    def kind(self):
        return self._value.kind

    def representation(self):
        """Name of the backing kind, e.g. 'Rational' or 'NegativeZero'."""
        return kind_names[self._value.kind]

    def __init__(self, x=None, apprx=None):
        ctx = evalctx.get_ctx()
        lossy = False

        if x is None:
            value = digital.ZERO
        elif isinstance(x, Number):
            value = x._value
            if apprx is None:
                apprx = x._apprx
        elif isinstance(x, digital.Value):
            value = x
        elif isinstance(x, (int, np.integer, gmp.mpz)):
            value, lossy = bridge.exact_value(int(x), 1, ctx)
        elif isinstance(x, (float, np.floating)):
            value = conversion.float_to_value(x)
        elif isinstance(x, (fractions.Fraction, gmp.mpq)):
            value, lossy = bridge.exact_value(int(x.numerator), int(x.denominator), ctx)
        elif isinstance(x, str):
            parsed = jsops.parse(x, ctx=ctx)
            value = parsed._value
            apprx = strongest(apprx, parsed._apprx)
        else:
            raise TypeError('cannot make a Number from {}'.format(repr(x)))

        if lossy:
            apprx = strongest(apprx, Apprx.RATIONAL_APPROXIMATION)
        value = bridge.canonicalize(value)
        if value.is_special():
            apprx = None
        elif apprx is not None:
            apprx = Apprx(apprx)

        self._value = value
        self._apprx = apprx

    @classmethod
    def _make(cls, value, apprx=None):
        """Wrap an already canonical value without any checks."""
        n = cls.__new__(cls)
        n._value = value
        if not value.is_special():
            n._apprx = apprx
        return n

    @classmethod
    def _finish(cls, value, apprx, ctx):
        """Canonicalize and demote a freshly computed value."""
        value = bridge.canonicalize(value)
        value, apprx = bridge.demote(value, apprx, ctx)
        return cls._make(value, apprx)

    def __repr__(self):
        return '{}(value={}, apprx={})'.format(
            type(self).__name__, repr(self._value),
            'None' if self._apprx is None else self._apprx.name,
        )

    def __str__(self):
        return jsops.to_js_string(self)

    # named constructors

    @classmethod
    def nan(cls):
        return cls._make(digital.NAN)

    @classmethod
    def infinity(cls):
        return cls._make(digital.POSITIVE_INFINITY)

    @classmethod
    def neg_infinity(cls):
        return cls._make(digital.NEGATIVE_INFINITY)

    @classmethod
    def neg_zero(cls):
        return cls._make(digital.NEGATIVE_ZERO)

    @classmethod
    def from_rational(cls, p, q=1):
        """Exact p/q. A zero denominator follows JS division: NaN or an infinity."""
        p = int(p)
        q = int(q)
        if q == 0:
            if p > 0:
                return cls.infinity()
            elif p < 0:
                return cls.neg_infinity()
            else:
                return cls.nan()
        ctx = evalctx.get_ctx()
        value, lossy = bridge.exact_value(p, q, ctx)
        return cls._make(value, Apprx.RATIONAL_APPROXIMATION if lossy else None)

    @classmethod
    def from_decimal(cls, m, scale=0):
        """Exact m * 10**-scale, as a Rational when that fits."""
        ctx = evalctx.get_ctx()
        return cls._finish(digital.decimal_or_big(int(m), int(scale)), None, ctx)

    @classmethod
    def from_bigdecimal(cls, m, scale=0):
        """Exact m * 10**-scale, demoted as far as it goes."""
        ctx = evalctx.get_ctx()
        return cls._finish(digital.BigDecimal(int(m), int(scale)), None, ctx)

    @classmethod
    def parse(cls, s):
        """Parse a JS-style numeric string. Raises ParseError."""
        return jsops.parse(s)

    @classmethod
    def from_str_radix(cls, s, radix):
        """Parse an integer written in radix 2..36. Raises ParseError."""
        return jsops.from_str_radix(s, radix)

    # predicates

    def is_nan(self):
        return self._value.is_nan()

    def is_finite(self):
        """True for every real value, including -0."""
        return self._value.is_finite()

    def is_infinite(self):
        return self._value.is_inf()

    def is_positive_infinity(self):
        return self._value.kind == Kind.POSITIVE_INFINITY

    def is_negative_infinity(self):
        return self._value.kind == Kind.NEGATIVE_INFINITY

    def is_neg_zero(self):
        return self._value.kind == Kind.NEGATIVE_ZERO

    def is_zero(self):
        """True for +0 and -0."""
        return self._value.is_zero()

    def is_truthy(self):
        return jsops.is_truthy(self)

    def is_falsy(self):
        return not jsops.is_truthy(self)

    def is_exact(self):
        return self._apprx is None

    def is_transcendental(self):
        return self._apprx == Apprx.TRANSCENDENTAL

    def is_rational_approximation(self):
        return self._apprx == Apprx.RATIONAL_APPROXIMATION

    def is_integer(self):
        v = self._value
        if v.is_finite_real():
            return v.is_integer()
        else:
            return v.kind == Kind.NEGATIVE_ZERO

    def is_positive(self):
        """True above zero, including +Infinity. Neither zero is positive."""
        return self._value.sign() > 0

    def is_negative(self):
        """True below zero, including -Infinity and -0."""
        v = self._value
        return v.sign() < 0 or v.kind == Kind.NEGATIVE_ZERO

    def _signbit(self):
        v = self._value
        if v.is_special():
            return v.negative
        else:
            return v.sign() < 0

    def signum(self):
        """1, -1 or 0, keeping the sign of -0 and propagating NaN."""
        v = self._value
        if v.is_nan() or v.kind == Kind.NEGATIVE_ZERO:
            return self
        elif v.is_zero():
            return ZERO
        elif v.sign() > 0:
            return ONE
        else:
            return NEGATIVE_ONE

    # arithmetic

    def _compute(self, opcode, other, ctx):
        value, lossy = bridge.compute(opcode, self._value, other._value, ctx)
        apprx = strongest(self._apprx, other._apprx)
        if lossy:
            apprx = strongest(apprx, Apprx.RATIONAL_APPROXIMATION)
        return self._finish(value, apprx, ctx)

    def _signed_zero(self, negative):
        if negative:
            return NEGATIVE_ZERO
        else:
            return ZERO

    def _signed_infinity(self, negative):
        if negative:
            return NEGATIVE_INFINITY
        else:
            return POSITIVE_INFINITY

    def add(self, other):
        a, b = self._value, other._value
        if a.is_nan() or b.is_nan():
            return NAN
        elif a.is_inf():
            if b.is_inf() and a.kind != b.kind:
                return NAN
            return self
        elif b.is_inf():
            return other
        elif a.kind == Kind.NEGATIVE_ZERO:
            # -0 + -0 = -0, -0 + x = x
            return other
        elif b.kind == Kind.NEGATIVE_ZERO:
            return self
        else:
            return self._compute(OP.add, other, evalctx.get_ctx())

    def sub(self, other):
        a, b = self._value, other._value
        if a.is_nan() or b.is_nan():
            return NAN
        elif a.is_inf():
            if b.kind == a.kind:
                return NAN
            return self
        elif b.is_inf():
            return other.neg()
        elif b.kind == Kind.NEGATIVE_ZERO:
            if a.kind == Kind.NEGATIVE_ZERO:
                return ZERO
            return self
        elif a.kind == Kind.NEGATIVE_ZERO:
            return other.neg()
        else:
            return self._compute(OP.sub, other, evalctx.get_ctx())

    def mul(self, other):
        a, b = self._value, other._value
        if a.is_nan() or b.is_nan():
            return NAN
        negative = self._signbit() != other._signbit()
        if a.is_inf() or b.is_inf():
            if a.is_zero() or b.is_zero():
                return NAN
            return self._signed_infinity(negative)
        elif a.is_zero() or b.is_zero():
            return self._signed_zero(negative)
        else:
            return self._compute(OP.mul, other, evalctx.get_ctx())

    def div(self, other):
        a, b = self._value, other._value
        if a.is_nan() or b.is_nan():
            return NAN
        negative = self._signbit() != other._signbit()
        if a.is_inf():
            if b.is_inf():
                return NAN
            return self._signed_infinity(negative)
        elif b.is_inf():
            if a.kind == Kind.NEGATIVE_ZERO:
                return NEGATIVE_ZERO
            return self._signed_zero(negative)
        elif b.is_zero():
            if a.is_zero():
                return NAN
            return self._signed_infinity(negative)
        elif a.is_zero():
            return self._signed_zero(negative)
        else:
            return self._compute(OP.div, other, evalctx.get_ctx())

    def rem(self, other):
        """Truncated remainder: the result takes the sign of the dividend."""
        a, b = self._value, other._value
        if a.is_nan() or b.is_nan() or a.is_inf() or b.is_zero():
            return NAN
        elif b.is_inf() or a.is_zero():
            return self
        result = self._compute(OP.rem, other, evalctx.get_ctx())
        if result.is_zero() and self._signbit():
            return NEGATIVE_ZERO
        return result

    def neg(self):
        v = self._value
        if v.is_nan():
            return self
        elif v.kind == Kind.POSITIVE_INFINITY:
            return NEGATIVE_INFINITY
        elif v.kind == Kind.NEGATIVE_INFINITY:
            return POSITIVE_INFINITY
        elif v.kind == Kind.NEGATIVE_ZERO:
            return ZERO
        elif v.is_zero():
            return NEGATIVE_ZERO
        elif v.kind == Kind.RATIONAL:
            ctx = evalctx.get_ctx()
            value, lossy = bridge.exact_value(-v.p, v.q, ctx)
            apprx = self._apprx
            if lossy:
                apprx = strongest(apprx, Apprx.RATIONAL_APPROXIMATION)
            return self._make(value, apprx)
        else:
            return self._make(type(v)(-v.m, v.scale), self._apprx)

    def increment(self):
        return self.add(ONE)

    def decrement(self):
        return self.sub(ONE)

    # operator sugar

    @classmethod
    def _coerce(cls, x):
        if isinstance(x, Number):
            return x
        elif isinstance(x, (int, float, np.integer, np.floating, fractions.Fraction, gmp.mpz, gmp.mpq)):
            return cls(x)
        else:
            return None

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.add(self)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.sub(self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.mul(self)

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.div(self)

    def __mod__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.rem(other)

    def __rmod__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.rem(self)

    def __pow__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return mathlib.pow(self, other)

    def __rpow__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return mathlib.pow(other, self)

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self

    def __abs__(self):
        return mathlib.abs(self)

    def __bool__(self):
        return jsops.is_truthy(self)

    def __floor__(self):
        return mathlib.floor(self)

    def __ceil__(self):
        return mathlib.ceil(self)

    def __trunc__(self):
        return mathlib.trunc(self)

    def __round__(self, ndigits=None):
        if ndigits is None:
            return mathlib.round(self)
        else:
            return mathlib.round_dp(self, ndigits)

    # math library

    def abs(self):
        return mathlib.abs(self)

    def floor(self):
        return mathlib.floor(self)

    def ceil(self):
        return mathlib.ceil(self)

    def trunc(self):
        return mathlib.trunc(self)

    def round(self):
        return mathlib.round(self)

    def round_dp(self, dp):
        return mathlib.round_dp(self, dp)

    def sqrt(self):
        return mathlib.sqrt(self)

    def pow(self, other):
        return mathlib.pow(self, self._coerce_strict(other))

    def exp(self):
        return mathlib.exp(self)

    def log(self):
        return mathlib.log(self)

    def log2(self):
        return mathlib.log2(self)

    def log10(self):
        return mathlib.log10(self)

    def sin(self):
        return mathlib.sin(self)

    def cos(self):
        return mathlib.cos(self)

    def tan(self):
        return mathlib.tan(self)

    def asin(self):
        return mathlib.asin(self)

    def acos(self):
        return mathlib.acos(self)

    def atan(self):
        return mathlib.atan(self)

    def atan2(self, x):
        """atan2(self, x): the angle of the point (x, self)."""
        return mathlib.atan2(self, self._coerce_strict(x))

    @classmethod
    def _coerce_strict(cls, x):
        n = cls._coerce(x)
        if n is None:
            raise TypeError('expected a number, got {}'.format(repr(x)))
        return n

    # JS coercions and bitwise operators

    def to_int32(self):
        return jsops.to_int32(self)

    def to_uint32(self):
        return jsops.to_uint32(self)

    def to_int64(self):
        return jsops.to_int64(self)

    def bitand_i32(self, other):
        return jsops.bitand(self, self._coerce_strict(other))

    def bitor_i32(self, other):
        return jsops.bitor(self, self._coerce_strict(other))

    def bitxor_i32(self, other):
        return jsops.bitxor(self, self._coerce_strict(other))

    def bitnot_i32(self):
        return jsops.bitnot(self)

    def shl_i32(self, other):
        return jsops.shl(self, self._coerce_strict(other))

    def shr_i32(self, other):
        return jsops.shr(self, self._coerce_strict(other))

    def unsigned_right_shift(self, other):
        """JS >>>: shift ToUint32(self) right, filling with zeros."""
        return jsops.ushr(self, self._coerce_strict(other))

    def __and__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitand(self, other)

    def __rand__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitand(other, self)

    def __or__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitor(self, other)

    def __ror__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitor(other, self)

    def __xor__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitxor(self, other)

    def __rxor__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.bitxor(other, self)

    def __invert__(self):
        return jsops.bitnot(self)

    def __lshift__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.shl(self, other)

    def __rlshift__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.shl(other, self)

    def __rshift__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.shr(self, other)

    def __rrshift__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return jsops.shr(other, self)

    def to_js_string(self):
        return jsops.to_js_string(self)

    def js_less_than(self, other):
        """JS abstract relational comparison: True, False, or None when NaN is involved."""
        return jsops.js_less_than(self, self._coerce_strict(other))

    # conversions

    def to_f64(self):
        """Nearest double. Never fails: NaN and the infinities map onto themselves."""
        return conversion.value_to_float(self._value)

    def __float__(self):
        return conversion.value_to_float(self._value)

    def _truncated(self, target):
        v = self._value
        if v.kind == Kind.NEGATIVE_ZERO:
            return 0
        elif v.is_finite_real():
            x = v.to_mpq()
            return utils.trunc_div(int(x.numerator), int(x.denominator))
        else:
            raise utils.NotRepresentableError('{} is not representable as {}'
                                              .format(jsops.to_js_string(self), target))

    def _narrow(self, lo, hi, target):
        i = self._truncated(target)
        if i < lo or i > hi:
            raise utils.NotRepresentableError('{} is out of range for {}'
                                              .format(jsops.to_js_string(self), target))
        return i

    def to_i32(self):
        """Truncate toward zero to a 32-bit signed integer, or raise NotRepresentableError."""
        return self._narrow(utils.I32_MIN, utils.I32_MAX, 'i32')

    def to_u32(self):
        return self._narrow(0, utils.U32_MAX, 'u32')

    def to_i64(self):
        return self._narrow(utils.I64_MIN, utils.I64_MAX, 'i64')

    def to_u64(self):
        return self._narrow(0, utils.U64_MAX, 'u64')

    def __int__(self):
        return self._truncated('int')

    def as_integer_ratio(self):
        """Exact (numerator, denominator) in lowest terms, denominator positive."""
        v = self._value
        if v.kind == Kind.NEGATIVE_ZERO:
            return 0, 1
        elif v.is_finite_real():
            x = v.to_mpq()
            return int(x.numerator), int(x.denominator)
        else:
            raise utils.NotRepresentableError('{} has no integer ratio'
                                              .format(jsops.to_js_string(self)))

    def to_rational64(self):
        """(p, q) when the value is exactly a 64-bit rational, else None."""
        v = self._value
        if v.kind == Kind.NEGATIVE_ZERO:
            return 0, 1
        elif v.is_finite_real():
            x = v.to_mpq()
            r = digital.rational_or_none(int(x.numerator), int(x.denominator))
            if r is not None:
                return r.p, r.q
        return None

    # comparison

    def compareto(self, other):
        """Compare to another number. The ordering returned is:
            -1 iff self < other
             0 iff self = other
             1 iff self > other
          None iff self and other are unordered
        NaN is unordered unless the context enables JS NaN equality, in which
        case NaN equals itself and sorts below everything else.
        """
        a, b = self._value, other._value

        if a.is_nan() or b.is_nan():
            if not evalctx.get_ctx().js_nan_equality:
                return None
            elif a.is_nan() and b.is_nan():
                return 0
            elif a.is_nan():
                return -1
            else:
                return 1

        if a.is_inf() or b.is_inf():
            x, y = a.sign() if a.is_inf() else 0, b.sign() if b.is_inf() else 0
            return (x > y) - (x < y)

        x, y = a.to_mpq(), b.to_mpq()
        return (x > y) - (x < y)

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is not None and order < 0

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is not None and order <= 0

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is not None and order == 0

    def __ne__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is None or order != 0

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is not None and order >= 0

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        order = self.compareto(other)
        return order is not None and order > 0

    def __hash__(self):
        v = self._value
        if v.is_nan():
            return _PyHASH_NAN
        elif v.kind == Kind.POSITIVE_INFINITY:
            return _PyHASH_INF
        elif v.kind == Kind.NEGATIVE_INFINITY:
            return -_PyHASH_INF
        elif v.is_zero():
            return 0
        else:
            x = v.to_mpq()
            return _rational_hash(int(x.numerator), int(x.denominator))

    # display

    def format(self, opts=None):
        """Format with DisplayOptions (regional separators, scientific notation...)."""
        return display.format_number(self, opts)

    @classmethod
    def parse_formatted(cls, s, opts=None):
        """Inverse of format() under matching ParseOptions."""
        return display.parse_formatted(s, opts)


NAN = Number._make(digital.NAN)
POSITIVE_INFINITY = Number._make(digital.POSITIVE_INFINITY)
NEGATIVE_INFINITY = Number._make(digital.NEGATIVE_INFINITY)
NEGATIVE_ZERO = Number._make(digital.NEGATIVE_ZERO)
ZERO = Number._make(digital.ZERO)
ONE = Number._make(digital.ONE)
NEGATIVE_ONE = Number._make(digital.Rational(-1))

Number.NAN = NAN
Number.POSITIVE_INFINITY = POSITIVE_INFINITY
Number.NEGATIVE_INFINITY = NEGATIVE_INFINITY
Number.NEGATIVE_ZERO = NEGATIVE_ZERO
Number.ZERO = ZERO
Number.ONE = ONE
