"""Sine and cosine.

The argument is reduced modulo pi/2, the reduced argument is halved r times,
sine and cosine are summed together from their Taylor series, and the double
angle formulas undo the halving. The quadrant picks signs and swaps.
"""

import gmpy2 as gmp

from ..core import digital
from ..core.ops import OP
from ..arithmetic import evalctx
from . import approx
from . import classify
from . import guard
from . import reduction


def cos_sin_approx(x, wp):
    """(cos(x), sin(x)) for finite nonzero x, as Approx values with
    relative error around 2**-wp.
    """
    # sin(x) ~ x for small x
    wp += max(0, -x.e)
    r = max(2, int(wp ** 0.5) // 3)
    state = reduction.reduce_trig(x, wp + 2 * r + 2 * wp.bit_length() + 12)
    W = state.wp
    ONE = gmp.mpz(1) << W

    t = state.residual >> r
    t2 = (t * t) >> W
    cos = ONE
    sin = t
    cos_term = ONE
    sin_term = t
    k = 0
    while cos_term or sin_term:
        cos_term = ((cos_term * t2) >> W) // ((2*k + 1) * (2*k + 2))
        sin_term = ((sin_term * t2) >> W) // ((2*k + 2) * (2*k + 3))
        if k & 1:
            cos += cos_term
            sin += sin_term
        else:
            cos -= cos_term
            sin -= sin_term
        k += 1

    for _ in range(r):
        cos, sin = ((cos * cos - sin * sin) >> W), ((sin * cos) >> (W - 1))

    # each doubling at most quadruples the error of the series; the residual's
    # own error, and the bits lost halving it, pass through with slope 1
    err = ((2 * k + 4) << (2 * r)) + state.err + (1 << r) + 1

    quadrant = state.branch
    if quadrant == 0:
        c, s = cos, sin
    elif quadrant == 1:
        c, s = -sin, cos
    elif quadrant == 2:
        c, s = -cos, -sin
    else:
        c, s = sin, -cos

    if x.negative:
        s = -s

    return approx.Approx(c, -W, err), approx.Approx(s, -W, err)


def sin(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.sin, x, ctx)
    if result is not None:
        return result

    # sin(x) = x - x**3/6 + ...
    if guard.is_tiny(3 * x.e + 1, x, ctx):
        return guard.perturb(x, False, ctx)

    return guard.correctly_round(lambda wp: cos_sin_approx(x, wp)[1], ctx, op=OP.sin)


def cos(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.cos, x, ctx)
    if result is not None:
        return result

    # cos(x) = 1 - x**2/2 + ...
    if guard.is_tiny(2 * x.e + 1, digital.ONE, ctx):
        return guard.perturb(digital.ONE, False, ctx)

    return guard.correctly_round(lambda wp: cos_sin_approx(x, wp)[0], ctx, op=OP.cos)
