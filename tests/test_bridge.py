"""Representation bridge: decimal forms, exact-first arithmetic, and demotion
with continued fraction recovery.
"""

import gmpy2 as gmp

from faithnum.core import utils, digital, bridge
from faithnum.core.ops import Kind, Apprx, OP


class TestDecimalForms:
    """Exact and rounded decimal expansions of fractions."""

    def test_exact_decimal(self):
        assert bridge.exact_decimal(1, 8) == (125, 3)
        assert bridge.exact_decimal(3, 20) == (15, 2)
        assert bridge.exact_decimal(-7, 1) == (-7, 0)
        assert bridge.exact_decimal(1, 3) is None

    def test_round_significant(self):
        """Rounded to a number of significant digits, ties to even."""
        assert bridge.round_significant(1, 3, 5) == (33333, 5)
        assert bridge.round_significant(2, 3, 3) == (667, 3)
        assert bridge.round_significant(-2, 3, 3) == (-667, 3)
        assert bridge.round_significant(0, 7, 3) == (0, 0)

    def test_clip(self):
        assert bridge.clip(123456, 0, 3) == (123, -3, True)
        assert bridge.clip(123, 0, 3) == (123, 0, False)
        assert bridge.clip(5, 0, None) == (5, 0, False)

    def test_promote(self, default_ctx):
        """Terminating rationals promote exactly, others are rounded."""
        value, lossy = bridge.promote(digital.Rational(1, 4), default_ctx)
        assert value == digital.Decimal(25, 2)
        assert not lossy

        value, lossy = bridge.promote(digital.Rational(1, 3), default_ctx)
        assert value.kind == Kind.BIGDECIMAL
        assert lossy
        assert len(str(value.c)) == default_ctx.division_digits


class TestCompute:
    """Binary operations on finite values."""

    def test_rational_closure(self, default_ctx):
        value, lossy = bridge.compute(OP.add, digital.Rational(1, 3), digital.Rational(2, 3), default_ctx)
        assert value == digital.Rational(1)
        assert not lossy

    def test_exact_zero_is_canonical(self, default_ctx):
        value, lossy = bridge.compute(OP.sub, digital.Decimal(5, 1), digital.Rational(1, 2), default_ctx)
        assert value is digital.ZERO

    def test_overflow_terminating(self, default_ctx):
        """I64_MAX + 1/2 leaves the rationals but stays exact and narrow."""
        value, lossy = bridge.compute(OP.add, digital.Rational(utils.I64_MAX), digital.Rational(1, 2), default_ctx)
        assert value.kind == Kind.DECIMAL
        assert not lossy
        assert value.to_mpq() == gmp.mpq(2 * utils.I64_MAX + 1, 2)

    def test_overflow_nonterminating(self, default_ctx):
        """I64_MAX + 1/3 has to round the third."""
        value, lossy = bridge.compute(OP.add, digital.Rational(utils.I64_MAX), digital.Rational(1, 3), default_ctx)
        assert value.kind == Kind.BIGDECIMAL
        assert lossy

    def test_decimal_division(self, default_ctx):
        """Quotients that terminate are exact even outside the rationals."""
        a = digital.BigDecimal(10**30)
        value, lossy = bridge.compute(OP.div, a, digital.Rational(8), default_ctx)
        assert not lossy
        assert value.to_mpq() == gmp.mpq(10**30, 8)

        value, lossy = bridge.compute(OP.div, a, digital.Rational(3), default_ctx)
        assert lossy

    def test_truncated_remainder(self, default_ctx):
        value, _ = bridge.compute(OP.rem, digital.Rational(-7), digital.Rational(3), default_ctx)
        assert value == digital.Rational(-1)
        value, _ = bridge.compute(OP.rem, digital.BigDecimal(10**30 + 7), digital.Rational(-10), default_ctx)
        assert value.to_mpq() == 7

    def test_clipped_result_is_lossy(self, default_ctx):
        ctx = default_ctx.let(max_digits=10)
        value, lossy = bridge.compute(OP.mul, digital.BigDecimal(10**30 + 1), digital.Rational(3), ctx)
        assert lossy
        assert len(str(value.c)) <= 10


class TestContinuedFraction:
    """Convergents within a tolerance."""

    def test_third(self):
        pq = bridge.continued_fraction(333333, 1000000, utils.I64_MAX, gmp.mpq(4, 10**6))
        assert pq == (1, 3)

    def test_negative_exact(self):
        assert bridge.continued_fraction(-1, 2, utils.I64_MAX, 0) == (-1, 2)

    def test_denominator_bound(self):
        """No convergent of 1/3 close enough has a denominator below 3."""
        assert bridge.continued_fraction(333333, 1000000, 2, gmp.mpq(1, 10**9)) is None


class TestDemote:
    """Moving results back down the lattice."""

    def test_scale_shift(self, default_ctx):
        value, apprx = bridge.demote(digital.BigDecimal(5, 1), None, default_ctx)
        assert value == digital.Rational(1, 2)
        assert apprx is None

    def test_big_to_fixed(self, default_ctx):
        value, _ = bridge.demote(digital.BigDecimal(10**20), None, default_ctx)
        assert value.kind == Kind.DECIMAL

    def test_recovers_third(self, default_ctx):
        """A tainted 0.333... with 100 digits is 1/3 again, and untainted."""
        m, scale = bridge.round_significant(1, 3, 100)
        value, apprx = bridge.demote(digital.BigDecimal(m, scale), Apprx.RATIONAL_APPROXIMATION, default_ctx)
        assert value == digital.Rational(1, 3)
        assert apprx is None

    def test_exact_values_not_recovered(self, default_ctx):
        """Without a taint a long decimal is taken at face value."""
        m, scale = bridge.round_significant(1, 3, 100)
        value, apprx = bridge.demote(digital.BigDecimal(m, scale), None, default_ctx)
        assert value.kind == Kind.BIGDECIMAL
        assert apprx is None

    def test_magnitude_guard(self, default_ctx):
        """Beyond 2**40 no recovery is attempted."""
        m, scale = bridge.round_significant(3 * 2**41 + 1, 3, 100)
        value, apprx = bridge.demote(digital.BigDecimal(m, scale), Apprx.RATIONAL_APPROXIMATION, default_ctx)
        assert value.kind == Kind.BIGDECIMAL
        assert apprx == Apprx.RATIONAL_APPROXIMATION

    def test_inexact_recovery_keeps_taint(self, default_ctx):
        """A convergent that does not reproduce the digits keeps the tag."""
        m, scale = bridge.round_significant(1, 3, 100)
        value, apprx = bridge.demote(digital.BigDecimal(m + 1, scale), Apprx.RATIONAL_APPROXIMATION, default_ctx)
        assert value == digital.Rational(1, 3)
        assert apprx == Apprx.RATIONAL_APPROXIMATION

    def test_exact_value(self, default_ctx):
        assert bridge.exact_value(1, -2, default_ctx) == (digital.Rational(-1, 2), False)
        value, lossy = bridge.exact_value(1, 3 * 2**64, default_ctx)
        assert value.kind == Kind.BIGDECIMAL
        assert lossy
