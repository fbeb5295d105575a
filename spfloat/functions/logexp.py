"""Natural logarithm and exponential.

Both are evaluated in fixed point with gmpy2 integers:
  - ln(x): x = m * 2**k, then r square roots of m, then the artanh series
    ln(m) = 2 * artanh((m - 1) / (m + 1)).
  - exp(x): x = n * ln(2) + t, then the Taylor series of exp(t / 2**r),
    squared r times.
"""

import gmpy2 as gmp

from ..core import digital
from ..core.ops import OP
from ..core.utils import PrecisionError, shift
from ..arithmetic import evalctx
from . import approx
from . import classify
from . import constants
from . import guard
from . import reduction


def _steps(wp):
    # square roots (or halvings) that balance against series terms
    return max(4, int(wp ** 0.5) // 2)


def _guard_bits(wp, r):
    return r + 2 * wp.bit_length() + 10


def ln_approx(x, wp):
    """ln(x) for finite x > 0, with absolute error around 2**-wp."""
    r = _steps(wp)
    W = wp + _guard_bits(wp, r) + abs(x.e).bit_length()
    ONE = gmp.mpz(1) << W

    state = reduction.reduce_log(x, W)
    k = state.branch
    m = state.residual
    for _ in range(r):
        m = gmp.isqrt(m << W)

    # artanh series on |y|; the terms stay nonnegative
    y = ((m - ONE) << W) // (m + ONE)
    negative = y < 0
    y = abs(y)
    y2 = (y * y) >> W
    s = y
    t = y
    j = 3
    terms = 0
    while t:
        t = (t * y2) >> W
        s += t // j
        j += 2
        terms += 1
    if negative:
        s = -s

    lnm = s << (r + 1)
    err = ((2 * terms + 8 + state.err) << (r + 1))

    if k != 0:
        lnm += k * constants.ln2_fixed(W)
        err += constants.ERR * abs(k) + 1

    return approx.Approx(lnm, -W, err)


def ln_of_approx(a, wp):
    """ln(a) for an Approx a that is bounded away from zero, with absolute
    error around 2**-wp plus the effect of the error of a.
    """
    if a.m <= 2 * a.err:
        raise PrecisionError('argument {} too close to zero'.format(repr(a)))
    v = ln_approx(digital.Digital(c=a.m, exp=a.exp), wp)
    # |ln(m +- e) - ln(m)| <= 2 * e / m for e <= m / 2
    extra = -(-(a.err << (1 - v.exp)) // a.m) + 1
    return approx.Approx(v.m, v.exp, v.err + extra)


def exp_approx(a, wp):
    """exp(a) for an Approx a, with relative error around 2**-wp.
    The error of a itself is carried into the result.
    """
    nbits = max(0, a.e + 1)
    r = _steps(wp)
    W = wp + _guard_bits(wp, r) + nbits
    ONE = gmp.mpz(1) << W

    T, terr = a.at_exp(-W)
    state = reduction.reduce_exp(gmp.mpz(T), terr, W)
    n = state.branch

    t = state.residual >> r
    s = ONE + t
    term = t
    j = 2
    terms = 0
    while term:
        term = ((term * t) >> W) // j
        s += term
        j += 1
        terms += 1

    for _ in range(r):
        s = (s * s) >> W

    # squaring r times multiplies the error of the series by at most 2**(r+1);
    # exp' < 2 on [0, ln 2) bounds the effect of the argument's error
    err = ((2 * terms + 4) << (r + 1)) + 2 * state.err + 2
    return approx.Approx(s, n - W, err)


# exp(x) for |x| * log2(base) beyond the exponent range cannot be represented;
# log2(base) is bounded below by num / 100 for each base
_LOG2_BASE = {
    OP.exp: 144,
    OP.exp2: 100,
    OP.exp10: 332,
}

def out_of_range(x, op, ctx):
    """Is op(x) certainly too large or too small for the exponent range of ctx?"""
    limit = max(ctx.emax, -ctx.emin) + 2
    if x.e > limit.bit_length() + 8:
        return True
    ipart = shift(x.c, x.exp)
    return ipart * _LOG2_BASE[op] > limit * 100


def out_of_range_result(x, ctx):
    if x.negative:
        return guard.underflow(False, ctx)
    else:
        return guard.overflow(False, ctx)


def ln_cancellation(x):
    """Bits lost to cancellation in ln(x) near x = 1."""
    if x.e in (-1, 0):
        d = approx.Approx.exact(x).sub(approx.ONE)
        if d.m != 0:
            return max(0, -d.e)
    return 0


# public functions

def ln(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.log, x, ctx)
    if result is not None:
        return result
    if x == digital.ONE:
        return digital.Digital(digital.POS_ZERO)

    return guard.correctly_round(lambda wp: ln_approx(x, wp), ctx,
                                 hint=ln_cancellation(x), op=OP.log)


def log1p(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.log1p, x, ctx)
    if result is not None:
        return result
    if x == digital.NEG_ONE:
        return digital.NEG_INF

    # log1p(x) = x - x**2/2 + ..., always below x
    if guard.is_tiny(2 * x.e + 1, x, ctx):
        return guard.perturb(x, x.negative, ctx)

    def evaluate(wp):
        if x.e > 0:
            a = ln_approx(x, wp)
            if x.e >= -a.exp:
                # 0 < ln(1 + x) - ln(x) < 1/x, below one unit of a
                return approx.Approx(a.m, a.exp, a.err + 1)
        sum_ = approx.Approx.exact(x).add(approx.ONE)
        return ln_approx(digital.Digital(m=sum_.m, exp=sum_.exp), wp)

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.log1p)


def exp(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.exp, x, ctx)
    if result is not None:
        return result
    if out_of_range(x, OP.exp, ctx):
        return out_of_range_result(x, ctx)

    # exp(x) = 1 + x + ..., |exp(x) - 1| < 2|x|
    if guard.is_tiny(x.e + 2, digital.ONE, ctx):
        return guard.perturb(digital.ONE, not x.negative, ctx)

    a = approx.Approx.exact(x)
    return guard.correctly_round(lambda wp: exp_approx(a, wp), ctx, op=OP.exp)


def expm1(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.expm1, x, ctx)
    if result is not None:
        return result
    if x.negative and x.e >= (ctx.p + 4).bit_length():
        # exp(x) < 2**-(p+4): just above -1
        return guard.perturb(digital.NEG_ONE, False, ctx)
    if out_of_range(x, OP.exp, ctx):
        return out_of_range_result(x, ctx)

    # expm1(x) = x + x**2/2 + ..., always above x
    if guard.is_tiny(2 * x.e + 2, x, ctx):
        return guard.perturb(x, not x.negative, ctx)

    a = approx.Approx.exact(x)
    return guard.correctly_round(lambda wp: exp_approx(a, wp).sub(approx.ONE), ctx,
                                 hint=max(0, -x.e), op=OP.expm1)


def e(ctx=None):
    return exp(digital.ONE, ctx)
