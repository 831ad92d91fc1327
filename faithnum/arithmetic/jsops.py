"""JavaScript semantics for Numbers: ToInt32 style coercions, the bitwise
operators, truthiness, ToString and string parsing.
"""

import re
import logging

from ..core import utils
from ..core import digital
from ..core import bridge
from ..core import conversion
from ..core.ops import Kind
from . import evalctx
from . import number


logger = logging.getLogger(__name__)

# decimal exponents beyond this are refused by the parser
MAX_PARSE_EXPONENT = 100000

# JS ToString switches to exponent form outside [1e-6, 1e21)
JS_EXP_HIGH = 21
JS_EXP_LOW = -6


# coercions

def _integer_part(n):
    """ToIntegerOrInfinity without the infinity: NaN, the infinities and -0 give 0."""
    v = n.value
    if not v.is_finite_real():
        return 0
    x = v.to_mpq()
    return utils.trunc_div(int(x.numerator), int(x.denominator))

def to_int32(n):
    """ECMAScript ToInt32, as a python int."""
    return utils.wrap_signed(_integer_part(n), 32)

def to_uint32(n):
    """ECMAScript ToUint32, as a python int."""
    return utils.maskbits(_integer_part(n), 32)

def to_int64(n):
    """ToInt32 widened to 64 bits: modulo 2**64, read as two's complement."""
    return utils.wrap_signed(_integer_part(n), 64)


# bitwise operators, on 32-bit two's complement integers

def _shift_count(n):
    return to_uint32(n) & 0x1f

def bitand(a, b):
    return number.Number(to_int32(a) & to_int32(b))

def bitor(a, b):
    return number.Number(to_int32(a) | to_int32(b))

def bitxor(a, b):
    return number.Number(to_int32(a) ^ to_int32(b))

def bitnot(a):
    return number.Number(~to_int32(a))

def shl(a, b):
    return number.Number(utils.wrap_signed(to_int32(a) << _shift_count(b), 32))

def shr(a, b):
    """Sign-propagating right shift (JS >>)."""
    return number.Number(to_int32(a) >> _shift_count(b))

def ushr(a, b):
    """Zero-filling right shift (JS >>>). The result is never negative."""
    return number.Number(to_uint32(a) >> _shift_count(b))


# truthiness and comparison

def is_truthy(n):
    """False for NaN and both zeros, True for everything else including the infinities."""
    v = n.value
    return not (v.is_nan() or v.is_zero())

def js_less_than(a, b):
    """Abstract relational comparison a < b: True, False or None (undefined) for NaN."""
    if a.value.is_nan() or b.value.is_nan():
        return None
    return a.compareto(b) < 0


# ToString

def digits_of(v, ctx=None):
    """Significant digits and point position of a finite nonzero value:
    (negative, s, point) with |v| == 0.s * 10**point, s free of trailing zeros.
    Non-terminating rationals are rounded to ctx.display_digits.
    """
    if ctx is None:
        ctx = evalctx.get_ctx()
    if v.kind == Kind.RATIONAL:
        exact = bridge.exact_decimal(v.p, v.q)
        if exact is None:
            m, scale = bridge.round_significant(v.p, v.q, ctx.display_digits)
        else:
            m, scale = exact
    else:
        m, scale = v.m, v.scale

    negative = m < 0
    c, k = utils.strip_factor(abs(m), 10)
    scale -= k
    s = utils.digits(c)
    return negative, s, len(s) - scale

def plain_string(n):
    """Positional decimal text of a finite value, never in exponent form."""
    v = n.value
    if v.is_special() or v.is_zero():
        return '0'
    negative, s, point = digits_of(v)
    if point <= 0:
        text = '0.' + '0' * (-point) + s
    elif point >= len(s):
        text = s + '0' * (point - len(s))
    else:
        text = s[:point] + '.' + s[point:]
    if negative:
        return '-' + text
    return text

def to_js_string(n):
    """Number::toString: shortest exact digits, exponent form when |n| >= 1e21
    or |n| < 1e-6, with an explicit '+' on positive exponents.
    """
    v = n.value
    if v.is_nan():
        return 'NaN'
    elif v.kind == Kind.POSITIVE_INFINITY:
        return 'Infinity'
    elif v.kind == Kind.NEGATIVE_INFINITY:
        return '-Infinity'
    elif v.is_zero():
        return '0'

    negative, s, point = digits_of(v)
    if JS_EXP_LOW < point <= JS_EXP_HIGH:
        return plain_string(n)

    e = point - 1
    if len(s) > 1:
        text = s[0] + '.' + s[1:]
    else:
        text = s
    text += 'e' + ('+' if e >= 0 else '-') + str(abs(e))
    if negative:
        return '-' + text
    return text


# parsing

_special_literals = {
    'NaN': digital.NAN,
    'Infinity': digital.POSITIVE_INFINITY,
    '+Infinity': digital.POSITIVE_INFINITY,
    '-Infinity': digital.NEGATIVE_INFINITY,
    '-0': digital.NEGATIVE_ZERO,
}

_fixed_re = re.compile(r'(?P<sign>[+-]?)(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?')
_exp_re = re.compile(r'(?P<sign>[+-]?)(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?[eE](?P<exp>[+-]?[0-9]+)')
_allowed_chars = frozenset('0123456789+-.eE')

def _digits_match(m):
    return bool(m.group('int') or m.group('frac'))

def _decimal_parts(m, exp=0):
    intpart = m.group('int') or ''
    frac = m.group('frac') or ''
    c = utils.from_digits(intpart + frac or '0')
    if m.group('sign') == '-':
        c = -c
    return c, len(frac) - exp

def _invalid_character(s):
    for i, ch in enumerate(s):
        if ch not in _allowed_chars:
            return i, ch
    return None

def parse(s, ctx=None):
    """Parse a numeric string the way the JS-facing API accepts them.
    Whitespace is trimmed. 'NaN', 'Infinity', '-Infinity' and '-0' are literal;
    the empty string is 0 when the context allows it. Otherwise the text is
    read as a fixed-width decimal, then as an arbitrary-precision decimal with
    an optional exponent, and finally as a float. Raises ParseError.
    """
    if ctx is None:
        ctx = evalctx.get_ctx()
    if not isinstance(s, str):
        raise TypeError('expected str, got {}'.format(repr(type(s))))

    text = s.strip()
    if text in _special_literals:
        return number.Number._make(_special_literals[text])
    if text == '':
        if ctx.empty_string_as_zero:
            return number.ZERO
        raise utils.ParseError('cannot parse an empty string', reason='empty')

    m = _fixed_re.fullmatch(text)
    if m is not None and _digits_match(m):
        c, scale = _decimal_parts(m)
        value = digital.decimal_or_big(c, scale)
        return _finish_parse(value, m.group('sign') == '-', ctx)

    m = _exp_re.fullmatch(text)
    if m is not None and _digits_match(m):
        exp_text = m.group('exp')
        exp = utils.from_digits(exp_text.lstrip('+-'))
        if exp_text.startswith('-'):
            exp = -exp
        if abs(exp) > MAX_PARSE_EXPONENT:
            raise utils.ParseError('exponent out of range in {}'.format(repr(s)), reason='overflow')
        c, scale = _decimal_parts(m, exp)
        value = digital.BigDecimal(c, scale)
        return _finish_parse(value, m.group('sign') == '-', ctx)

    # python's float() would take digit separators, JS does not
    if '_' in text:
        pos = text.index('_')
        raise utils.ParseError('invalid character {} at position {} in {}'
                               .format(repr('_'), pos, repr(s)),
                               reason='invalid_character', pos=pos, ch='_')
    try:
        f = float(text)
    except ValueError:
        bad = _invalid_character(text)
        if bad is None:
            raise utils.ParseError('invalid number {}'.format(repr(s)), reason='syntax')
        pos, ch = bad
        raise utils.ParseError('invalid character {} at position {} in {}'
                               .format(repr(ch), pos, repr(s)),
                               reason='invalid_character', pos=pos, ch=ch)
    logger.debug('parsed %r as a float', s)
    return number.Number._finish(conversion.float_to_value(f), None, ctx)

def _finish_parse(value, negative, ctx):
    if value.is_zero() and negative:
        return number.NEGATIVE_ZERO
    return number.Number._finish(value, None, ctx)

def from_str_radix(s, radix):
    """Parse an integer string in the given radix (2 to 36). Raises ParseError."""
    if not isinstance(radix, int) or radix < 2 or radix > 36:
        raise ValueError('radix must be between 2 and 36, got {}'.format(repr(radix)))

    text = s.strip()
    negative = text.startswith('-')
    body = text[1:] if text[:1] in ('+', '-') else text
    if body == '':
        raise utils.ParseError('no digits in {}'.format(repr(s)), reason='empty')

    offset = len(text) - len(body)
    result = 0
    for i, ch in enumerate(body):
        digit = int(ch, 36) if ch.isascii() and ch.isalnum() else radix
        if digit >= radix:
            raise utils.ParseError('invalid digit {} for radix {} in {}'
                                   .format(repr(ch), radix, repr(s)),
                                   reason='invalid_character', pos=offset + i, ch=ch)
        result = result * radix + digit

    if negative:
        if result == 0:
            return number.NEGATIVE_ZERO
        result = -result
    return number.Number(result)
