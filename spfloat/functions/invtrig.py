"""Inverse trigonometric functions, all through a fixed-point arctangent.

acos(x) = 2 * atan(sqrt((1 - x) / (1 + x))) for x > 0 and
acos(x) = pi - 2 * atan(sqrt((1 + x) / (1 - x))) for x < 0, with 1 - x and
1 + x formed exactly, so there is no cancellation near x = +-1.
asin(x) = 2 * atan(x / (1 + sqrt(1 - x**2))).
"""

import gmpy2 as gmp

from ..core import digital
from ..core.ops import OP
from ..arithmetic import evalctx
from . import approx
from . import classify
from . import constants
from . import guard
from . import reduction


def atan_fixed(z, W):
    """atan(z) for 0 <= z <= 1 with W fractional bits.
    Returns the result and its error bound, excluding the error of z
    (atan has slope at most 1, so that error passes through unchanged).
    """
    ONE = gmp.mpz(1) << W
    r = max(2, int(W ** 0.5) // 3)

    # atan(z) = 2 * atan(z / (1 + sqrt(1 + z**2)))
    for _ in range(r):
        z2 = (z * z) >> W
        z = (z << W) // (ONE + gmp.isqrt((ONE + z2) << W))

    z2 = (z * z) >> W
    s = z
    t = z
    j = 1
    while t:
        t = (t * z2) >> W
        if j & 1:
            s -= t // (2*j + 1)
        else:
            s += t // (2*j + 1)
        j += 1

    return s << r, (2 * j + 8) << r


def _fixed_ratio(a, b, prec):
    """floor(a / b * 2**prec) for finite positive Digitals a and b."""
    offset = a.exp - b.exp + prec
    if offset >= 0:
        return (gmp.mpz(a.c) << offset) // b.c
    else:
        return gmp.mpz(a.c) // (gmp.mpz(b.c) << -offset)


def _exact(a):
    return digital.Digital(m=a.m, exp=a.exp)


def _working_precision(wp):
    return wp + 2 * wp.bit_length() + int(wp ** 0.5) + 12


def acos_approx(x, wp):
    """acos(x) for -1 < x < 1, x nonzero."""
    W = _working_precision(wp)
    u = _exact(approx.ONE.sub(approx.Approx.exact(x)))
    v = _exact(approx.ONE.add(approx.Approx.exact(x)))

    if x.negative:
        ratio = _fixed_ratio(v, u, 2 * W)
    else:
        ratio = _fixed_ratio(u, v, 2 * W)
    # sqrt of the ratio, within 2 units
    z = gmp.isqrt(ratio)

    a, aerr = atan_fixed(z, W)
    value = 2 * a
    err = 2 * (aerr + 2)
    if x.negative:
        value = constants.pi_fixed(W) - value
        err += constants.ERR
    return approx.Approx(value, -W, err)


def asin_approx(x, wp):
    """asin(x) for -1 < x < 1, x nonzero."""
    W = _working_precision(wp)
    ONE = gmp.mpz(1) << W
    w = _exact(approx.ONE.sub(approx.Approx.exact(x)).mul(approx.ONE.add(approx.Approx.exact(x))))

    root = gmp.isqrt(reduction.to_fixed(w, 2 * W)[0])
    xw = reduction.to_fixed(x, W)[0]
    z = (gmp.mpz(xw) << W) // (ONE + root)

    a, aerr = atan_fixed(z, W)
    err = 2 * (aerr + 4)
    if x.negative:
        return approx.Approx(-2 * a, -W, err)
    else:
        return approx.Approx(2 * a, -W, err)


def atan_approx(x, wp):
    """atan(x) for finite nonzero x."""
    W = _working_precision(wp)
    if x.e < 0:
        z = reduction.to_fixed(x, W)[0]
        a, aerr = atan_fixed(gmp.mpz(z), W)
        value = a
        err = aerr + 1
    else:
        # atan(|x|) = pi/2 - atan(1/|x|)
        z = _fixed_ratio(digital.ONE, x, W)
        a, aerr = atan_fixed(z, W)
        value = (constants.pi_fixed(W) >> 1) - a
        err = aerr + constants.ERR + 2

    if x.negative:
        value = -value
    return approx.Approx(value, -W, err)


def atan2_approx(y, x, wp):
    """atan2(y, x) for finite nonzero y and x."""
    W = _working_precision(wp)
    ay = digital.Digital(y, negative=False)
    ax = digital.Digital(x, negative=False)
    if ay <= ax:
        a, aerr = atan_fixed(_fixed_ratio(ay, ax, W), W)
        value = a
        err = aerr + 1
    else:
        # atan(|y/x|) = pi/2 - atan(|x/y|)
        a, aerr = atan_fixed(_fixed_ratio(ax, ay, W), W)
        value = (constants.pi_fixed(W) >> 1) - a
        err = aerr + constants.ERR + 2

    if x.negative:
        value = constants.pi_fixed(W) - value
        err += constants.ERR
    if y.negative:
        value = -value
    return approx.Approx(value, -W, err)


def acos(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.acos, x, ctx)
    if result is not None:
        return result
    if x == digital.ONE:
        return digital.Digital(digital.POS_ZERO)
    if x == digital.NEG_ONE:
        return constants.pi(ctx)

    # near 1, acos(x) ~ sqrt(2 * (1 - x))
    if x.negative:
        hint = 0
    else:
        u = approx.ONE.sub(approx.Approx.exact(x))
        hint = max(0, -u.e // 2 + 1)

    return guard.correctly_round(lambda wp: acos_approx(x, wp), ctx, hint=hint, op=OP.acos)


def asin(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.asin, x, ctx)
    if result is not None:
        return result
    if x == digital.ONE or x == digital.NEG_ONE:
        return constants.half_pi(ctx, negative=x.negative)

    # asin(x) = x + x**3/6 + ...
    if guard.is_tiny(3 * x.e + 1, x, ctx):
        return guard.perturb(x, True, ctx)

    return guard.correctly_round(lambda wp: asin_approx(x, wp), ctx, hint=max(0, -x.e), op=OP.asin)


def atan(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.atan, x, ctx)
    if result is not None:
        return result

    # atan(x) = x - x**3/3 + ...
    if guard.is_tiny(3 * x.e + 2, x, ctx):
        return guard.perturb(x, False, ctx)

    return guard.correctly_round(lambda wp: atan_approx(x, wp), ctx, hint=max(0, -x.e), op=OP.atan)
