"""Evaluation context: feature flags and limits shared by every Number operation,
plus the per-thread precision used for transcendentals.
"""

import contextlib
import threading

from ..core import utils


class NumberCtx(object):
    """Feature flags and limits for faithful arithmetic.
    Contexts are never mutated once built: use let() to derive a new one.
    """

    # NaN == NaN, and NaN sorts below -Infinity
    js_nan_equality = False
    # '' parses to 0 instead of raising ParseError
    empty_string_as_zero = True
    # transcendentals with MPFR at the thread-local precision, else IEEE double
    high_precision = True

    # significant digits kept when a non-terminating fraction is forced into decimal form
    division_digits = 100
    # significant digits a decimal result may carry before it is clipped
    max_digits = 2000

    # continued fraction recovery of tainted decimals
    cf_max_denominator = utils.I64_MAX
    cf_magnitude_limit = 1 << 40
    cf_tolerance_ulps = 4

    # significant digits printed for non-terminating rationals
    display_digits = 28
    # with max_digits unset, integer exponents beyond this go through MPFR
    max_exact_exponent = 1024

    _flags = ('js_nan_equality', 'empty_string_as_zero', 'high_precision')
    _limits = ('division_digits', 'max_digits', 'cf_max_denominator', 'cf_magnitude_limit',
               'cf_tolerance_ulps', 'display_digits', 'max_exact_exponent')

    def __init__(self, **fields):
        self._update(fields)

    def _update(self, fields):
        for name, value in fields.items():
            if name in self._flags:
                setattr(self, name, bool(value))
            elif name in self._limits:
                if name == 'max_digits' and value is None:
                    setattr(self, name, None)
                    continue
                if not isinstance(value, int) or value < 1:
                    raise ValueError('context field {} must be a positive integer, got {}'
                                     .format(name, repr(value)))
                setattr(self, name, value)
            else:
                raise ValueError('unknown context field {}'.format(repr(name)))

    def let(self, **fields):
        """Create a new context, updated with any provided fields."""
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx.__dict__.update(self.__dict__)
        newctx._update(fields)
        return newctx

    def __repr__(self):
        args = ['{}={}'.format(k, repr(v)) for k, v in self.__dict__.items()]
        return '{}({})'.format(type(self).__name__, ', '.join(args))

    def __str__(self):
        fields = ['    {}: {}'.format(k, getattr(self, k)) for k in self._flags + self._limits]
        return '\n'.join([type(self).__name__ + ':', *fields])


_ctx = NumberCtx()

def get_ctx():
    """The context in effect for the whole process."""
    return _ctx

def set_ctx(ctx):
    """Install ctx for the whole process; returns the previous context."""
    global _ctx
    if not isinstance(ctx, NumberCtx):
        raise TypeError('expected NumberCtx, got {}'.format(repr(type(ctx))))
    prev = _ctx
    _ctx = ctx
    return prev

@contextlib.contextmanager
def using(**fields):
    """Run a block under get_ctx().let(**fields), restoring the old context after."""
    prev = set_ctx(get_ctx().let(**fields))
    try:
        yield get_ctx()
    finally:
        set_ctx(prev)


# precision, in bits, for transcendentals: one setting per thread

DEFAULT_PRECISION = 256

class _Precision(threading.local):
    bits = DEFAULT_PRECISION

_precision = _Precision()

def set_default_precision(bits):
    """Set this thread's precision for subsequent transcendentals.
    The setting is kept while high precision is disabled, and applies once it
    is enabled again.
    """
    if not isinstance(bits, int) or bits < 2:
        raise ValueError('precision must be an integer of at least 2 bits, got {}'.format(repr(bits)))
    _precision.bits = bits

def get_default_precision():
    """This thread's precision in bits, or 0 when transcendentals use IEEE double."""
    if not get_ctx().high_precision:
        return 0
    return _precision.bits
