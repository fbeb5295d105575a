from fractions import Fraction

import pytest

from spfloat.core.digital import Digital
from spfloat.core.utils import PrecisionError
from spfloat.functions.approx import Approx, ONE


def value(x):
    return Fraction(x.m) * Fraction(2) ** x.exp


def contains(a, v):
    lo, hi = a.bounds()
    return value(lo) <= v <= value(hi)


def test_exact():
    a = Approx.exact(Digital(m=-5, exp=-3))
    assert (a.m, a.exp, a.err) == (-5, -3, 0)
    with pytest.raises(ValueError):
        Approx.exact(Digital(isnan=True))


def test_negative_error_is_rejected():
    with pytest.raises(ValueError):
        Approx(1, 0, -1)


def test_e_bounds_the_interval():
    a = Approx(7, -2, 1)
    # [1.5, 2] has exponent at most 1
    assert a.e == 1
    assert not a.contains_zero()
    assert Approx(1, 0, 1).contains_zero()


def test_at_exp_covers_truncation():
    a = Approx(0b10111, -4, 1)
    m, err = a.at_exp(-2)
    assert contains(Approx(m, -2, err), Fraction(0b10111 + 1, 16))
    assert contains(Approx(m, -2, err), Fraction(0b10111 - 1, 16))


def test_add_and_sub():
    a = Approx(3, -1, 1)
    b = Approx(5, -3, 2)
    assert contains(a.add(b), Fraction(3 + 1, 2) + Fraction(5 - 2, 8))
    assert contains(a.sub(b), Fraction(3 - 1, 2) - Fraction(5 + 2, 8))


def test_add_with_precision_cap():
    big = Approx(1 << 40, 0, 0)
    small = Approx(3, -100, 0)
    total = big.add(small, prec=60)
    assert total.exp >= 40 - 60
    assert contains(total, (1 << 40) + Fraction(3, 2 ** 100))


def test_mul():
    a = Approx(-3, 0, 1)
    b = Approx(5, -1, 1)
    for x in (-4, -2):
        for y in (Fraction(4, 2), Fraction(6, 2)):
            assert contains(a.mul(b), x * y)
    assert a.mul(b, prec=2).m.bit_length() <= 3


def test_div():
    a = Approx(100, 0, 1)
    b = Approx(7, 0, 1)
    q = a.div(b, 30)
    for x in (99, 101):
        for y in (6, 8):
            assert contains(q, Fraction(x, y))
    assert contains(ONE.div(Approx(-3, 0, 0), 20), Fraction(-1, 3))


def test_div_by_possible_zero():
    with pytest.raises(PrecisionError):
        ONE.div(Approx(1, -10, 2), 53)


def test_scale_and_neg():
    a = Approx(3, 0, 1).scale(-2).neg()
    assert (a.m, a.exp, a.err) == (-3, -2, 1)
