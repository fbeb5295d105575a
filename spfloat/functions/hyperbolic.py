"""Hyperbolic functions, from exp(|x|) and its reciprocal, and their
inverses, which are logarithms of values formed in fixed point.
"""

import gmpy2 as gmp

from ..core import digital
from ..core.ops import OP
from ..arithmetic import evalctx
from . import approx
from . import classify
from . import guard
from . import invtrig
from . import logexp
from . import reduction


def _exp_pair(x, wp):
    """exp(|x|) and exp(-|x|)."""
    a = approx.Approx.exact(digital.Digital(x, negative=False))
    ex = logexp.exp_approx(a, wp)
    return ex, approx.ONE.div(ex, wp)


def sinh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.sinh, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp, ctx):
        return guard.overflow(x.negative, ctx)

    # sinh(x) = x + x**3/6 + ...
    if guard.is_tiny(3 * x.e + 1, x, ctx):
        return guard.perturb(x, True, ctx)

    def evaluate(wp):
        ex, inv = _exp_pair(x, wp)
        s = ex.sub(inv, prec=wp + 8).scale(-1)
        if x.negative:
            return s.neg()
        else:
            return s

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.sinh)


def cosh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.cosh, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp, ctx):
        return guard.overflow(False, ctx)

    # cosh(x) = 1 + x**2/2 + ...
    if guard.is_tiny(2 * x.e + 2, digital.ONE, ctx):
        return guard.perturb(digital.ONE, True, ctx)

    def evaluate(wp):
        ex, inv = _exp_pair(x, wp)
        return ex.add(inv, prec=wp + 8).scale(-1)

    return guard.correctly_round(evaluate, ctx, op=OP.cosh)


def tanh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.tanh, x, ctx)
    if result is not None:
        return result

    if x.e >= (ctx.p + 4).bit_length():
        # 1 - |tanh(x)| < 2 * exp(-2|x|), far below the last place of 1
        if x.negative:
            return guard.perturb(digital.NEG_ONE, False, ctx)
        else:
            return guard.perturb(digital.ONE, False, ctx)

    # tanh(x) = x - x**3/3 + ...
    if guard.is_tiny(3 * x.e + 2, x, ctx):
        return guard.perturb(x, False, ctx)

    def evaluate(wp):
        # tanh(|x|) = (exp(2|x|) - 1) / (exp(2|x|) + 1)
        a = approx.Approx.exact(digital.Digital(x, negative=False)).scale(1)
        ex = logexp.exp_approx(a, wp)
        t = ex.sub(approx.ONE).div(ex.add(approx.ONE), wp)
        if x.negative:
            return t.neg()
        else:
            return t

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.tanh)


# inverses

def _signed(a, negative):
    if negative:
        return a.neg()
    else:
        return a


def asinh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.asinh, x, ctx)
    if result is not None:
        return result

    # asinh(x) = x - x**3/6 + ...
    if guard.is_tiny(3 * x.e + 1, x, ctx):
        return guard.perturb(x, False, ctx)

    def evaluate(wp):
        # asinh(|x|) = ln(|x| + sqrt(x**2 + 1))
        F = wp + 8
        t = gmp.mpz(reduction.to_fixed(x, F)[0])
        r = gmp.isqrt(t * t + (gmp.mpz(1) << (2 * F)))
        a = logexp.ln_of_approx(approx.Approx(t + r, -F, 5), wp)
        return _signed(a, x.negative)

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.asinh)


def acosh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.acosh, x, ctx)
    if result is not None:
        return result
    if x == digital.ONE:
        return digital.Digital(digital.POS_ZERO)

    # near 1, acosh(x) ~ sqrt(2 * (x - 1))
    u = approx.Approx.exact(x).sub(approx.ONE)
    hint = max(0, -u.e // 2 + 1)

    def evaluate(wp):
        # acosh(x) = ln(x + sqrt((x - 1) * (x + 1)))
        F = wp + 8
        w = invtrig._exact(u.mul(approx.Approx.exact(x).add(approx.ONE)))
        r = gmp.isqrt(reduction.to_fixed(w, 2 * F)[0])
        t = gmp.mpz(reduction.to_fixed(x, F)[0])
        return logexp.ln_of_approx(approx.Approx(t + r, -F, 4), wp)

    return guard.correctly_round(evaluate, ctx, hint=hint, op=OP.acosh)


def atanh(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.atanh, x, ctx)
    if result is not None:
        return result
    if x == digital.ONE or x == digital.NEG_ONE:
        return digital.Digital(negative=x.negative, isinf=True)

    # atanh(x) = x + x**3/3 + ...
    if guard.is_tiny(3 * x.e + 2, x, ctx):
        return guard.perturb(x, True, ctx)

    def evaluate(wp):
        # atanh(|x|) = ln((1 + |x|) / (1 - |x|)) / 2
        F = wp + 8
        ax = approx.Approx.exact(digital.Digital(x, negative=False))
        u = invtrig._exact(approx.ONE.add(ax))
        v = invtrig._exact(approx.ONE.sub(ax))
        q = invtrig._fixed_ratio(u, v, F)
        a = logexp.ln_of_approx(approx.Approx(q, -F, 1), wp).scale(-1)
        return _signed(a, x.negative)

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.atanh)
