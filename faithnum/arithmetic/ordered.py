"""Total order wrapper, for Numbers used as dict keys, set members or sort keys."""

from . import number


class OrderedNumber(object):
    """A Number with NaN == NaN and the total order
    NaN < -Infinity < finite values < +Infinity, with +0 == -0.
    Hashes agree with Number's, so equal values collide across kinds.
    """

    _number = number.ZERO

    @property
    def number(self):
        """The wrapped Number."""
        return self._number

    def __init__(self, x=None):
        if isinstance(x, OrderedNumber):
            self._number = x._number
        elif isinstance(x, number.Number):
            self._number = x
        else:
            self._number = number.Number(x)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, repr(self._number))

    def __str__(self):
        return str(self._number)

    def compareto(self, other):
        """-1, 0 or 1. Never unordered."""
        a, b = self._number, other._number
        a_nan, b_nan = a.is_nan(), b.is_nan()
        if a_nan or b_nan:
            return b_nan - a_nan
        return a.compareto(b)

    @classmethod
    def _wrap(cls, x):
        if isinstance(x, OrderedNumber):
            return x
        elif isinstance(x, number.Number):
            return cls(x)
        else:
            n = number.Number._coerce(x)
            if n is None:
                return None
            return cls(n)

    def __lt__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) < 0

    def __le__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) <= 0

    def __eq__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) == 0

    def __ne__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) != 0

    def __ge__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) >= 0

    def __gt__(self, other):
        other = self._wrap(other)
        if other is None:
            return NotImplemented
        return self.compareto(other) > 0

    def __hash__(self):
        return hash(self._number)
