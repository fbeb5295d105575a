import gmpy2 as gmp
import pytest

from spfloat.core import conversion
from spfloat.core.digital import Digital
from spfloat.functions import reduction


def d(f):
    return conversion.float_to_digital(f)


def test_to_fixed():
    assert reduction.to_fixed(Digital(c=3, exp=-1), 4) == (24, True)
    assert reduction.to_fixed(Digital(m=-3, exp=-3), 1) == (0, False)


@pytest.mark.parametrize('f', [0.4, 1.0, 1.5, 9.999, 1e-300, 1e300])
def test_reduce_log(f):
    wp = 80
    state = reduction.reduce_log(d(f), wp)
    m = state.residual
    # m in [sqrt(1/2), sqrt(2)) as a fixed-point number
    assert 2 * m * m >= 1 << (2 * wp)
    assert m * m < 2 << (2 * wp)
    with gmp.context(precision=200):
        assert abs(gmp.mpfr(m) * gmp.exp2(state.branch - wp) - f) <= f * gmp.exp2(1 - wp)


@pytest.mark.parametrize('f', [0.5, 3.0, 100.0, 1e22, 1e300])
def test_reduce_trig(f):
    wp = 100
    state = reduction.reduce_trig(d(f), wp)
    assert 0 <= state.branch < 4
    assert state.wp >= wp
    with gmp.context(precision=state.wp + 2000):
        x = gmp.mpfr(f)
        half_pi = gmp.const_pi() / 2
        q = gmp.floor(x / half_pi)
        r = x - q * half_pi
        assert int(q) % 4 == state.branch
        residual = gmp.mpfr(state.residual) * gmp.exp2(-state.wp)
        assert abs(residual - r) <= state.err * gmp.exp2(-state.wp)


def test_reduce_trig_ignores_sign():
    a = reduction.reduce_trig(d(5.0), 80)
    b = reduction.reduce_trig(d(-5.0), 80)
    assert (a.branch, a.residual) == (b.branch, b.residual)


def test_reduce_trig_near_a_multiple_of_half_pi():
    # the double closest to pi/2 leaves a residual of about 6e-17
    state = reduction.reduce_trig(d(1.5707963267948966), 60)
    assert state.branch == 0
    assert state.residual.bit_length() > state.wp - 2
    assert state.wp >= 60 + 20
