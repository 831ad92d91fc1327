"""Math library: special-value tables, exact rounding and powers, and
transcendentals at high and IEEE double precision.
"""

import math

import pytest

from faithnum import Number, Apprx
from faithnum.arithmetic import mathlib, evalctx
from faithnum.core import digital


NAN = Number.nan()
INF = Number.infinity()
NEG_INF = Number.neg_infinity()
NEG_ZERO = Number.neg_zero()


def close(n, x, tol=1e-15):
    return abs(n.to_f64() - x) <= tol * max(1.0, abs(x))


class TestAbs:

    def test_specials(self):
        assert not NEG_ZERO.abs().is_neg_zero()
        assert NEG_ZERO.abs().is_zero()
        assert NEG_INF.abs().is_positive_infinity()
        assert NAN.abs().is_nan()

    def test_keeps_tag(self):
        x = Number(-2, apprx=Apprx.RATIONAL_APPROXIMATION)
        assert abs(x) == 2
        assert abs(x).apprx == Apprx.RATIONAL_APPROXIMATION


class TestRounding:
    """floor, ceil, trunc and round are exact and clear the tag."""

    def test_floor_ceil_trunc(self):
        assert Number('-0.5').floor() == -1
        assert Number('-0.5').ceil().is_neg_zero()
        assert Number('-0.5').trunc().is_neg_zero()
        assert not Number('0.5').floor().is_neg_zero()
        assert Number('2.7').ceil() == 3
        assert math.floor(Number('7.9')) == 7

    def test_round_halves_go_up(self):
        """Math.round semantics: -3.5 rounds to -3, 3.5 to 4."""
        assert Number('2.5').round() == 3
        assert Number('3.5').round() == 4
        assert Number('-2.5').round() == -2
        assert Number('-3.5').round() == -3
        assert Number('-3.6').round() == -4
        assert Number('-0.4').round().is_neg_zero()
        assert Number('-0.5').round().is_neg_zero()

    def test_specials_preserved(self):
        for f in (mathlib.floor, mathlib.ceil, mathlib.trunc, mathlib.round):
            assert f(NEG_ZERO).is_neg_zero()
            assert f(INF).is_positive_infinity()
            assert f(NEG_INF).is_negative_infinity()
            assert f(NAN).is_nan()

    def test_clears_tag(self):
        x = Number('2.7', apprx=Apprx.TRANSCENDENTAL)
        assert x.floor() == 2
        assert x.floor().apprx is None
        assert x.round().apprx is None

    def test_round_dp(self):
        """Banker's rounding to a number of decimal places."""
        assert Number('1.235').round_dp(2) == Number('1.24')
        assert Number('1.245').round_dp(2) == Number('1.24')
        assert Number('-1.255').round_dp(2) == Number('-1.26')
        assert Number.from_rational(1, 3).round_dp(3) == Number('0.333')
        assert Number('-0.001').round_dp(2).is_neg_zero()
        assert round(Number('2.675'), 2) == Number('2.68')
        assert Number('5', apprx=Apprx.TRANSCENDENTAL).round_dp(1).apprx is None
        with pytest.raises(ValueError):
            Number(1).round_dp(-1)


class TestSqrt:

    def test_perfect_squares_are_exact(self):
        r = Number(4).sqrt()
        assert r.value == digital.Rational(2)
        assert r.apprx is None
        assert Number('0.25').sqrt() == Number('0.5')
        assert Number.from_rational(9, 49).sqrt().value == digital.Rational(3, 7)
        assert Number(10**40).sqrt() == Number(10**20)

    def test_irrational(self):
        r = Number(2).sqrt()
        assert r.apprx == Apprx.TRANSCENDENTAL
        assert r.representation() == 'BigDecimal'
        assert close(r, math.sqrt(2))

    def test_specials(self):
        assert Number(-1).sqrt().is_nan()
        assert NEG_INF.sqrt().is_nan()
        assert INF.sqrt().is_positive_infinity()
        assert NAN.sqrt().is_nan()
        root = NEG_ZERO.sqrt()
        assert root.is_zero() and not root.is_neg_zero()

    def test_newton_fallback(self, low_precision):
        r = Number(2).sqrt()
        assert r.apprx == Apprx.TRANSCENDENTAL
        assert close(r, math.sqrt(2))
        assert Number(9).sqrt() == 3


class TestPow:

    def test_integer_exponents_are_exact(self):
        assert Number(2) ** 10 == 1024
        assert (Number(2) ** 10).apprx is None
        assert Number(2) ** -2 == Number('0.25')
        assert Number('1.5') ** 2 == Number('2.25')
        assert Number(-2) ** 3 == -8
        assert (Number(10) ** 40).as_integer_ratio() == (10**40, 1)

    def test_zero_exponent(self):
        for b in (NAN, Number(0), NEG_ZERO, INF, NEG_INF, Number(7)):
            assert b ** Number(0) == 1
            assert b ** NEG_ZERO == 1

    def test_zero_base(self):
        assert (Number(0) ** 2).is_zero()
        assert (Number(0) ** -1).is_positive_infinity()
        assert (NEG_ZERO ** 3).is_neg_zero()
        squared = NEG_ZERO ** 2
        assert squared.is_zero() and not squared.is_neg_zero()
        assert (NEG_ZERO ** -1).is_negative_infinity()
        assert (NEG_ZERO ** INF).is_zero()
        assert (NEG_ZERO ** NEG_INF).is_positive_infinity()

    def test_infinite_exponent(self):
        assert (Number(2) ** INF).is_positive_infinity()
        assert (Number(2) ** NEG_INF) == 0
        assert (Number('0.5') ** INF) == 0
        assert (Number('0.5') ** NEG_INF).is_positive_infinity()
        assert Number(1) ** INF == 1
        assert Number(-1) ** NEG_INF == 1

    def test_infinite_base(self):
        assert (INF ** 2).is_positive_infinity()
        assert (INF ** -1) == 0
        assert (NEG_INF ** 3).is_negative_infinity()
        assert (NEG_INF ** 2).is_positive_infinity()
        assert (NEG_INF ** -3).is_neg_zero()

    def test_nan(self):
        assert (NAN ** 1).is_nan()
        assert (Number(1) ** NAN).is_nan()

    def test_negative_base_fractional_exponent(self):
        assert (Number(-8) ** Number('0.5')).is_nan()
        assert (Number(-8) ** Number.from_rational(1, 3)).is_nan()

    def test_half_is_sqrt(self):
        assert (Number(4) ** Number('0.5')).value == digital.Rational(2)
        r = Number(2) ** Number('0.5')
        assert r.apprx == Apprx.TRANSCENDENTAL
        assert close(r, math.sqrt(2))

    def test_fractional(self):
        r = Number(2) ** Number('1.5')
        assert r.apprx == Apprx.TRANSCENDENTAL
        assert close(r, 2 ** 1.5)

    def test_large_exponent(self):
        r = Number(2) ** 2000
        assert r.apprx is None
        assert r == 2**2000
        assert r.to_f64() == float('inf')

    def test_exactness_follows_result_size(self):
        """Exact while the result fits max_digits, whatever the exponent."""
        assert (Number(2) ** 1025).apprx is None
        assert Number(2) ** 1025 == 2**1025
        assert (Number(2) ** 5000).apprx is None
        assert (Number(2) ** -1025).as_integer_ratio() == (1, 2**1025)
        assert (Number(1) ** 100000).apprx is None
        assert (Number('-0.5') ** 2001).as_integer_ratio() == (-1, 2**2001)
        assert (Number('0.5') ** 3001).apprx == Apprx.TRANSCENDENTAL

        r = Number(2) ** 7000
        assert r.apprx == Apprx.TRANSCENDENTAL
        assert r.is_finite()
        assert close(r.log2(), 7000)

    def test_exponent_limit_without_max_digits(self):
        with evalctx.using(max_digits=None):
            assert (Number(2) ** 1024).apprx is None
            assert (Number(2) ** 1025).apprx == Apprx.TRANSCENDENTAL


class TestExpLog:

    def test_specials(self):
        assert Number.exp(NEG_INF) == 0
        assert Number.exp(INF).is_positive_infinity()
        assert Number.log(Number(0)).is_negative_infinity()
        assert Number.log(NEG_ZERO).is_negative_infinity()
        assert Number.log(Number(-1)).is_nan()
        assert Number.log(INF).is_positive_infinity()
        assert Number.log10(NEG_INF).is_nan()
        assert Number.log2(NAN).is_nan()

    def test_values(self):
        assert close(Number(2).exp(), math.exp(2))
        assert close(Number(10).log(), math.log(10))
        assert close(Number(8).log2(), 3.0)
        assert close(Number(1000).log10(), 3.0)

    def test_tagged(self):
        one = Number(0).exp()
        assert one == 1
        assert one.apprx == Apprx.TRANSCENDENTAL
        assert Number(3).log().apprx == Apprx.TRANSCENDENTAL


class TestTrig:

    def test_signed_zero(self):
        assert NEG_ZERO.sin().is_neg_zero()
        assert NEG_ZERO.tan().is_neg_zero()
        assert NEG_ZERO.cos() == 1
        assert NEG_ZERO.asin().is_neg_zero()
        assert NEG_ZERO.atan().is_neg_zero()

    def test_domain(self):
        for f in (Number.sin, Number.cos, Number.tan):
            assert f(INF).is_nan()
            assert f(NAN).is_nan()
        assert Number(2).asin().is_nan()
        assert Number('-1.5').acos().is_nan()
        assert INF.asin().is_nan()

    def test_values(self):
        assert close(Number(1).sin(), math.sin(1))
        assert close(Number(1).cos(), math.cos(1))
        assert close(Number(1).tan(), math.tan(1))
        assert close(Number(1).asin(), math.pi / 2)
        assert close(NEG_ZERO.acos(), math.pi / 2)
        assert close(INF.atan(), math.pi / 2)
        assert close(NEG_INF.atan(), -math.pi / 2)
        assert Number(1).sin().apprx == Apprx.TRANSCENDENTAL

    def test_atan2_quadrants(self):
        assert close(INF.atan2(INF), math.pi / 4)
        assert close(INF.atan2(NEG_INF), 3 * math.pi / 4)
        assert close(Number(-1).atan2(NEG_INF), -math.pi)
        assert close(NEG_ZERO.atan2(NEG_INF), -math.pi)
        assert close(Number(0).atan2(NEG_ZERO), math.pi)
        assert NEG_ZERO.atan2(Number(0)).is_neg_zero()
        assert close(Number(1).atan2(Number(-1)), math.atan2(1, -1))
        assert NAN.atan2(Number(1)).is_nan()


class TestConstants:

    def test_pi_and_e(self):
        assert mathlib.pi().to_f64() == math.pi
        assert mathlib.e().to_f64() == math.e
        assert mathlib.pi().apprx == Apprx.TRANSCENDENTAL

    def test_double_fallback(self, low_precision):
        assert mathlib.pi().to_f64() == math.pi
        assert close(Number(2).exp(), math.exp(2))
        assert NEG_ZERO.sin().is_neg_zero()
