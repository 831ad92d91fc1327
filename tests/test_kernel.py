"""Value kernel: the Rational, Decimal and BigDecimal kinds, the special
values and the integer helpers underneath them.
"""

import pytest

from faithnum.core import utils, digital
from faithnum.core.ops import Kind, Apprx, strongest


class TestRational:
    """64-bit rationals are kept reduced with a positive denominator."""

    def test_reduced(self):
        """6/-4 is stored as -3/2."""
        r = digital.Rational(6, -4)
        assert (r.p, r.q) == (-3, 2)
        assert r.kind == Kind.RATIONAL

    def test_zero_denominator(self):
        """A zero denominator is a programming error, not a value."""
        with pytest.raises(ZeroDivisionError):
            digital.Rational(1, 0)

    def test_overflow(self):
        """Parts beyond 64 bits are refused."""
        with pytest.raises(OverflowError):
            digital.Rational(2**63)
        with pytest.raises(OverflowError):
            digital.Rational(1, 2**63)
        assert digital.Rational(utils.I64_MIN).p == utils.I64_MIN

    def test_reduction_makes_it_fit(self):
        """Only the reduced form has to fit."""
        r = digital.Rational(2**64, 2**62)
        assert (r.p, r.q) == (4, 1)

    def test_nonterminating(self):
        """1/3 has no finite decimal expansion, 3/40 does."""
        assert digital.Rational(1, 3).nonterminating
        assert not digital.Rational(3, 40).nonterminating

    def test_predicates(self):
        """Integer, zero and sign queries."""
        assert digital.Rational(4, 2).is_integer()
        assert not digital.Rational(1, 2).is_integer()
        assert digital.Rational(0).is_zero()
        assert digital.Rational(-1, 2).sign() == -1


class TestDecimal:
    """Base-10 kinds are normalized on construction."""

    def test_trailing_zeros_stripped(self):
        """1500 * 10**-2 is 15."""
        d = digital.Decimal(1500, 2)
        assert (d.c, d.scale) == (15, 0)

    def test_fixed_width_scale_never_negative(self):
        """A Decimal absorbs negative scales into its significand."""
        d = digital.Decimal(15, -1)
        assert (d.c, d.scale) == (150, 0)

    def test_big_scale_may_be_negative(self):
        """A BigDecimal keeps the short form."""
        d = digital.BigDecimal(15, -1)
        assert (d.c, d.scale) == (15, -1)
        assert d.exp == 1

    def test_limits(self):
        """96 significand bits, scale at most 28."""
        assert digital.fits_decimal(2**96 - 1, 28)
        assert not digital.fits_decimal(2**96, 0)
        assert not digital.fits_decimal(1, 29)
        with pytest.raises(OverflowError):
            digital.Decimal(2**96)
        with pytest.raises(OverflowError):
            digital.Decimal(1, 29)

    def test_signed_significand(self):
        """m carries the sign, c does not; e is the leading digit's exponent."""
        d = digital.BigDecimal(-1230, 3)
        assert (d.m, d.c, d.scale) == (-123, 123, 2)
        assert d.negative
        assert d.e == 0

    def test_exact_mpq(self):
        """to_mpq is exact."""
        assert digital.Decimal(125, 3).to_mpq() == digital.Rational(1, 8).to_mpq()
        assert digital.BigDecimal(3, -40).to_mpq() == 3 * 10**40

    def test_structural_equality(self):
        """Kernel equality is structural: kinds never compare equal."""
        assert digital.Decimal(5) == digital.Decimal(50, 1)
        assert digital.Decimal(5) != digital.BigDecimal(5)

    def test_decimal_or_big(self):
        """The narrow kind is used when it fits and is allowed."""
        assert digital.decimal_or_big(10**20, 0).kind == Kind.DECIMAL
        assert digital.decimal_or_big(10**40, 0).kind == Kind.BIGDECIMAL
        assert digital.decimal_or_big(5, 0, narrow=False).kind == Kind.BIGDECIMAL

    def test_rational_or_none(self):
        assert digital.rational_or_none(1, 2**64) is None
        assert digital.rational_or_none(2, 4) == digital.Rational(1, 2)


class TestSpecial:
    """NaN, the infinities and -0."""

    def test_flags(self):
        assert digital.NAN.is_nan()
        assert digital.POSITIVE_INFINITY.is_inf()
        assert digital.NEGATIVE_INFINITY.negative
        assert digital.NEGATIVE_ZERO.is_zero()
        assert digital.NEGATIVE_ZERO.is_finite()
        assert not digital.NEGATIVE_ZERO.is_finite_real()

    def test_only_special_kinds(self):
        with pytest.raises(ValueError):
            digital.Special(Kind.RATIONAL)

    def test_negative_zero_is_zero(self):
        assert digital.NEGATIVE_ZERO.to_mpq() == 0
        with pytest.raises(ValueError):
            digital.NAN.to_mpq()


class TestApprx:
    """Approximation tags are ordered None < RATIONAL_APPROXIMATION < TRANSCENDENTAL."""

    def test_strongest(self):
        assert strongest() is None
        assert strongest(None, None) is None
        assert strongest(None, Apprx.RATIONAL_APPROXIMATION) == Apprx.RATIONAL_APPROXIMATION
        assert strongest(Apprx.TRANSCENDENTAL, Apprx.RATIONAL_APPROXIMATION) == Apprx.TRANSCENDENTAL


class TestIntegerHelpers:
    """Helpers in utils."""

    def test_wrap_signed(self):
        assert utils.wrap_signed(2**31, 32) == -2**31
        assert utils.wrap_signed(-1, 32) == -1
        assert utils.wrap_signed(2**32 + 5, 32) == 5

    def test_round_half_even(self):
        assert utils.round_half_even(5, 2) == 2
        assert utils.round_half_even(7, 2) == 4
        assert utils.round_half_even(-5, 2) == -2
        assert utils.round_half_even(2, 3) == 1

    def test_trunc_div(self):
        assert utils.trunc_div(-7, 2) == -3
        assert utils.trunc_div(7, -2) == -3
        assert utils.trunc_div(7, 2) == 3

    def test_decimal_exponent(self):
        assert utils.decimal_exponent(1, 3) == -1
        assert utils.decimal_exponent(100, 1) == 2
        assert utils.decimal_exponent(99, 1) == 1
        assert utils.decimal_exponent(1, 10) == -1
        assert utils.decimal_exponent(1, 1) == 0

    def test_strip_factor(self):
        assert utils.strip_factor(1200, 10) == (12, 2)
        assert utils.is_terminating(40)
        assert not utils.is_terminating(12)

    def test_huge_integers(self):
        """Digit helpers take integers past python's str() conversion limit."""
        big = 10**5000
        assert utils.num_digits(big) == 5001
        assert utils.num_digits(big - 1) == 5000
        assert utils.num_digits(0) == 1
        assert utils.num_digits(-999) == 3
        assert utils.decimal_exponent(big, 3) == 4999
        text = utils.digits(-big)
        assert len(text) == 5002 and text.startswith('-1000')
        assert utils.from_digits(text) == -big

    def test_huge_kernel_values(self):
        big = 10**5000 + 1
        assert digital.rational_or_none(big, 1) is None
        with pytest.raises(OverflowError):
            digital.Decimal(big)
        with pytest.raises(OverflowError):
            digital.Decimal(1, -5000)
        d = digital.BigDecimal(big)
        assert d.e == 5000
        assert str(d).startswith('+ 1000')
        assert repr(d).endswith('scale=0)')
