"""Regional and scientific formatting of Numbers, and parsing of the
strings that formatting produces.
"""

import typing
from enum import IntEnum, unique

from ..core import utils
from . import jsops
from . import number


@unique
class Notation(IntEnum):
    DECIMAL = 0
    SCIENTIFIC = 1
    # exponent is a multiple of 3
    ENGINEERING = 2

@unique
class ExpNotation(IntEnum):
    # 1.23e6
    E = 0
    # 1.23×10^6
    TIMES10 = 1

exp_markers = {
    ExpNotation.E: 'e',
    ExpNotation.TIMES10: '×10^',
}


class RegionalFormat(typing.NamedTuple):
    """Separators for the integer and fractional parts of a number.
    secondary_grouping_size, when set, applies to every group left of the
    first, as in the Indian 1,23,45,678.
    """
    decimal_separator: str = '.'
    thousands_separator: typing.Optional[str] = None
    grouping_size: typing.Optional[int] = None
    secondary_grouping_size: typing.Optional[int] = None

    @classmethod
    def us(cls):
        return cls('.', ',', 3)

    @classmethod
    def european(cls):
        return cls(',', '.', 3)

    @classmethod
    def si(cls):
        return cls('.', ' ', 3)

    @classmethod
    def indian(cls):
        return cls('.', ',', 3, 2)

    @classmethod
    def plain(cls):
        return cls()


class DisplayOptions(typing.NamedTuple):
    # cap on fractional digits (decimal notation), extra digits are truncated
    decimal_places: typing.Optional[int] = None
    # digits kept by scientific and engineering notation, truncated
    significant_figures: typing.Optional[int] = None
    notation: Notation = Notation.DECIMAL
    exp_notation: ExpNotation = ExpNotation.E
    regional_format: RegionalFormat = RegionalFormat()

    @classmethod
    def standard(cls):
        return cls()

    @classmethod
    def scientific(cls):
        return cls(significant_figures=6, notation=Notation.SCIENTIFIC)

    @classmethod
    def scientific_times(cls):
        return cls(significant_figures=6, notation=Notation.SCIENTIFIC,
                   exp_notation=ExpNotation.TIMES10)

    @classmethod
    def engineering(cls):
        return cls(significant_figures=6, notation=Notation.ENGINEERING)

    @classmethod
    def us(cls):
        return cls(regional_format=RegionalFormat.us())

    @classmethod
    def european(cls):
        return cls(regional_format=RegionalFormat.european())

    @classmethod
    def si(cls):
        return cls(regional_format=RegionalFormat.si())

    @classmethod
    def indian(cls):
        return cls(regional_format=RegionalFormat.indian())


class ParseOptions(typing.NamedTuple):
    regional_format: RegionalFormat = RegionalFormat()
    allow_scientific: bool = True

    @classmethod
    def us(cls):
        return cls(RegionalFormat.us())

    @classmethod
    def european(cls):
        return cls(RegionalFormat.european())

    @classmethod
    def si(cls):
        return cls(RegionalFormat.si())

    @classmethod
    def indian(cls):
        return cls(RegionalFormat.indian())


# formatting

def group_digits(digits, fmt):
    """Insert the thousands separator into a string of integer digits."""
    sep = fmt.thousands_separator
    size = fmt.grouping_size
    if sep is None or not size:
        return digits

    groups = []
    rest = digits
    if len(rest) > size:
        groups.append(rest[-size:])
        rest = rest[:-size]
        size = fmt.secondary_grouping_size or size
        while len(rest) > size:
            groups.append(rest[-size:])
            rest = rest[:-size]
    groups.append(rest)
    return sep.join(reversed(groups))

def _format_zero(opts):
    sep = opts.regional_format.decimal_separator
    if opts.notation == Notation.DECIMAL:
        if opts.decimal_places:
            return '0' + sep + '0' * opts.decimal_places
        return '0'
    sig = opts.significant_figures
    if sig is None:
        sig = 6
    mantissa = '0' + sep + '0' if sig > 1 else '0'
    return mantissa + exp_markers[opts.exp_notation] + '0'

def _format_decimal(text, negative, opts):
    intpart, _, frac = text.partition('.')
    if opts.decimal_places is not None:
        frac = frac[:opts.decimal_places]

    result = group_digits(intpart, opts.regional_format)
    if frac:
        result += opts.regional_format.decimal_separator + frac
    if negative:
        return '-' + result
    return result

def _truncate_mantissa(digits, intlen, opts):
    """Lay out a mantissa with intlen integer digits, truncated to the significant figures."""
    sep = opts.regional_format.decimal_separator
    sig = opts.significant_figures
    if sig is not None and len(digits) > sig:
        digits = digits[:sig]
    if len(digits) <= intlen:
        return digits + '0' * (intlen - len(digits))
    return digits[:intlen] + sep + digits[intlen:]

def _format_exponent(digits, point, negative, opts):
    exponent = point - 1
    intlen = 1
    if opts.notation == Notation.ENGINEERING:
        shift = exponent % 3
        exponent -= shift
        intlen += shift

    result = (_truncate_mantissa(digits, intlen, opts)
              + exp_markers[opts.exp_notation] + str(exponent))
    if negative:
        return '-' + result
    return result

def format_number(n, opts=None):
    """Render n under DisplayOptions (the plain default when opts is None).
    Special values print their JS string; digits past the requested
    precision are truncated, not rounded.
    """
    if opts is None:
        opts = DisplayOptions()
    v = n.value
    if v.is_nan() or v.is_inf():
        return jsops.to_js_string(n)
    elif v.is_zero():
        return _format_zero(opts)

    if opts.notation == Notation.DECIMAL:
        text = jsops.plain_string(n)
        negative = text.startswith('-')
        return _format_decimal(text.lstrip('-'), negative, opts)
    else:
        negative, digits, point = jsops.digits_of(v)
        return _format_exponent(digits, point, negative, opts)


# parsing

def _split_exponent(s, opts):
    if not opts.allow_scientific:
        return s, 0

    marker = exp_markers[ExpNotation.TIMES10]
    pos = s.find(marker)
    if pos >= 0:
        mantissa, exp_text = s[:pos], s[pos + len(marker):]
    else:
        pos = s.lower().find('e')
        if pos < 0 or opts.regional_format.decimal_separator in ('e', 'E'):
            return s, 0
        mantissa, exp_text = s[:pos], s[pos + 1:]

    try:
        exponent = int(exp_text)
    except ValueError:
        raise utils.ParseError('bad exponent {}'.format(repr(exp_text)), reason='mismatched_format')
    if abs(exponent) > jsops.MAX_PARSE_EXPONENT:
        raise utils.ParseError('exponent out of range: {}'.format(exponent), reason='overflow')
    return mantissa, exponent

def _normalize(s, fmt):
    """Digits of the mantissa and the count of them after the decimal separator."""
    digits = []
    scale = None
    for pos, ch in enumerate(s):
        if '0' <= ch <= '9':
            digits.append(ch)
            if scale is not None:
                scale += 1
        elif ch == fmt.decimal_separator:
            if scale is not None:
                raise utils.ParseError('more than one decimal separator in {}'.format(repr(s)),
                                       reason='multiple_separators')
            scale = 0
        elif ch == fmt.thousands_separator:
            continue
        else:
            raise utils.ParseError('invalid character {} at position {}'.format(repr(ch), pos),
                                   reason='invalid_character', pos=pos, ch=ch)

    if not digits:
        if scale is None:
            raise utils.ParseError('no digits in {}'.format(repr(s)), reason='empty')
        raise utils.ParseError('no digits in {}'.format(repr(s)), reason='mismatched_format')
    return ''.join(digits), scale or 0

def parse_formatted(s, opts=None):
    """Inverse of format_number under matching ParseOptions. Raises ParseError."""
    if opts is None:
        opts = ParseOptions()
    text = s.strip()
    if text == '':
        raise utils.ParseError('cannot parse an empty string', reason='empty')
    if text == 'NaN':
        return number.NAN
    elif text == 'Infinity':
        return number.POSITIVE_INFINITY
    elif text == '-Infinity':
        return number.NEGATIVE_INFINITY

    negative = text.startswith('-')
    if text[:1] in ('+', '-'):
        text = text[1:]

    mantissa, exponent = _split_exponent(text, opts)
    digits, scale = _normalize(mantissa, opts.regional_format)
    result = number.Number.from_bigdecimal(utils.from_digits(digits), scale - exponent)
    if negative:
        return result.neg()
    return result
