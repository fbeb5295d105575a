"""Functions composed from the primitive evaluators.

tan, sec, csc and cot are quotients of the joint sine and cosine, sech,
csch and coth are reciprocals built from exp(|x|), and
log2, log10, exp2 and exp10 change base through ln(2) and ln(10).
The quotient is formed from the error-bounded approximations, so it is
still rounded only once.
"""

import gmpy2 as gmp

from ..core import digital
from ..core import gmpmath
from ..core.ops import OP
from ..core.utils import shift
from ..arithmetic import evalctx
from . import approx
from . import classify
from . import constants
from . import guard
from . import hyperbolic
from . import invtrig
from . import logexp
from . import trig


def _quotient(num, den, ctx):
    """num / den for special (exact) operands."""
    result = classify.quotient_class(num, den)
    if result is not None:
        return result
    return guard.round_digital(gmpmath.compute(OP.div, num, den, prec=ctx.p), ctx)


def _quotient_leading(num, den, correction_e, away, ctx):
    """Round num/den + d, for |d| < 2**correction_e.
    Returns None if d is not small enough to be resolved from num/den alone.
    """
    prec = ctx.p + den.p + 4
    # an inexact num/den is at least 2**-(den.p) units of prec bits from the
    # nearest value with prec bits, so a smaller d cannot change the rounding
    if correction_e >= num.e - den.e - prec - den.p - 4:
        return None
    q = gmpmath.compute(OP.div, num, den, prec=prec)
    if q.inexact:
        return guard.round_digital(q, ctx)
    else:
        return guard.perturb(q, away, ctx)


def _reciprocal_leading(x, correction_e, away, ctx):
    return _quotient_leading(digital.ONE, x, correction_e, away, ctx)


# trigonometric quotients

def tan(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    if classify.classify(x) is not classify.SpecialValue.FINITE:
        return _quotient(trig.sin(x, ctx), trig.cos(x, ctx), ctx)

    # tan(x) = x + x**3/3 + ...
    if guard.is_tiny(3 * x.e + 2, x, ctx):
        return guard.perturb(x, True, ctx)

    def evaluate(wp):
        cos, sin = trig.cos_sin_approx(x, wp)
        return sin.div(cos, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.tan)


def sec(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    if classify.classify(x) is not classify.SpecialValue.FINITE:
        return _quotient(digital.ONE, trig.cos(x, ctx), ctx)

    # sec(x) = 1 + x**2/2 + ...
    if guard.is_tiny(2 * x.e + 2, digital.ONE, ctx):
        return guard.perturb(digital.ONE, True, ctx)

    def evaluate(wp):
        cos, _ = trig.cos_sin_approx(x, wp)
        return approx.ONE.div(cos, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.sec)


def csc(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    if classify.classify(x) is not classify.SpecialValue.FINITE:
        return _quotient(digital.ONE, trig.sin(x, ctx), ctx)

    # csc(x) = 1/x + x/6 + ...
    result = _reciprocal_leading(x, x.e, True, ctx)
    if result is not None:
        return result

    def evaluate(wp):
        _, sin = trig.cos_sin_approx(x, wp)
        return approx.ONE.div(sin, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.csc)


def cot(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    if classify.classify(x) is not classify.SpecialValue.FINITE:
        return _quotient(trig.cos(x, ctx), trig.sin(x, ctx), ctx)

    # cot(x) = 1/x - x/3 - ...
    result = _reciprocal_leading(x, x.e, False, ctx)
    if result is not None:
        return result

    def evaluate(wp):
        cos, sin = trig.cos_sin_approx(x, wp)
        return cos.div(sin, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.cot)


# hyperbolic reciprocals

def sech(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.sech, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp, ctx):
        return guard.underflow(False, ctx)

    # sech(x) = 1 - x**2/2 + ...
    if guard.is_tiny(2 * x.e + 1, digital.ONE, ctx):
        return guard.perturb(digital.ONE, False, ctx)

    def evaluate(wp):
        ex, inv = hyperbolic._exp_pair(x, wp)
        return approx.ONE.div(ex.add(inv, prec=wp + 8), wp).scale(1)

    return guard.correctly_round(evaluate, ctx, op=OP.sech)


def csch(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.csch, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp, ctx):
        return guard.underflow(x.negative, ctx)

    # csch(x) = 1/x - x/6 + ...
    result = _reciprocal_leading(x, x.e, False, ctx)
    if result is not None:
        return result

    def evaluate(wp):
        ex, inv = hyperbolic._exp_pair(x, wp)
        q = approx.ONE.div(ex.sub(inv, prec=wp + 8), wp).scale(1)
        if x.negative:
            return q.neg()
        else:
            return q

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.csch)


def coth(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.coth, x, ctx)
    if result is not None:
        return result

    if x.e >= (ctx.p + 4).bit_length():
        # |coth(x)| - 1 < 4 * exp(-2|x|), far below the last place of 1
        if x.negative:
            return guard.perturb(digital.NEG_ONE, True, ctx)
        else:
            return guard.perturb(digital.ONE, True, ctx)

    # coth(x) = 1/x + x/3 - ...
    result = _reciprocal_leading(x, x.e, True, ctx)
    if result is not None:
        return result

    def evaluate(wp):
        # coth(|x|) = (exp(2|x|) + 1) / (exp(2|x|) - 1)
        a = approx.Approx.exact(digital.Digital(x, negative=False)).scale(1)
        ex = logexp.exp_approx(a, wp)
        t = ex.add(approx.ONE).div(ex.sub(approx.ONE), wp)
        if x.negative:
            return t.neg()
        else:
            return t

    return guard.correctly_round(evaluate, ctx, hint=max(0, -x.e), op=OP.coth)


# two-argument arctangent

def atan2(y, x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.atan2_class(y, x, ctx)
    if result is not None:
        return result

    if x.negative:
        hint = 0
    else:
        # atan(y/x) = y/x - (y/x)**3/3 + ...
        result = _quotient_leading(y, x, 3 * (y.e - x.e + 1), False, ctx)
        if result is not None:
            return result
        hint = max(0, x.e - y.e + 1)

    return guard.correctly_round(lambda wp: invtrig.atan2_approx(y, x, wp), ctx, hint=hint, op=OP.atan2)


# change of base

def _integer_result(k, ctx):
    return guard.round_digital(digital.Digital(m=k, exp=0), ctx)


def _power_of_ten(x):
    """k if x is exactly 10**k for some integer k >= 0, else None."""
    if x.negative or not x.is_integer():
        return None
    c, twos = gmp.remove(gmp.mpz(x.c), 2)
    k = int(twos) + x.exp
    # 5**k has more than 2k bits
    if k < 0 or 2 * k > c.bit_length():
        return None
    if c == gmp.mpz(5) ** k:
        return k
    else:
        return None


def log2(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.log, x, ctx)
    if result is not None:
        return result
    if x.is_power_of_two():
        return _integer_result(x.e, ctx)

    def evaluate(wp):
        return logexp.ln_approx(x, wp + 4).div(constants.ln2_approx(wp + 4), wp)

    return guard.correctly_round(evaluate, ctx, hint=logexp.ln_cancellation(x), op=OP.log2)


def log10(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.log, x, ctx)
    if result is not None:
        return result
    k = _power_of_ten(x)
    if k is not None:
        return _integer_result(k, ctx)

    def evaluate(wp):
        return logexp.ln_approx(x, wp + 4).div(constants.ln10_approx(wp + 4), wp)

    return guard.correctly_round(evaluate, ctx, hint=logexp.ln_cancellation(x), op=OP.log10)


def exp2(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.exp, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp2, ctx):
        return logexp.out_of_range_result(x, ctx)
    if x.is_integer():
        return guard.round_digital(digital.Digital(c=1, exp=shift(x.m, x.exp)), ctx)

    # exp2(x) = 1 + x*ln(2) + ..., |exp2(x) - 1| < 2|x|
    if guard.is_tiny(x.e + 1, digital.ONE, ctx):
        return guard.perturb(digital.ONE, not x.negative, ctx)

    def evaluate(wp):
        a = approx.Approx.exact(x).mul(constants.ln2_approx(wp + max(0, x.e) + 8))
        return logexp.exp_approx(a, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.exp2)


def exp10(x, ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    result = classify.special_case(OP.exp, x, ctx)
    if result is not None:
        return result
    if logexp.out_of_range(x, OP.exp10, ctx):
        return logexp.out_of_range_result(x, ctx)
    if x.is_integer() and not x.negative:
        k = shift(x.c, x.exp)
        # beyond 2p, 10**k is neither representable nor halfway between
        # two representable values, so it can be rounded like any other result
        if k <= 2 * ctx.p:
            return guard.round_digital(digital.Digital(c=5 ** k, exp=k), ctx)

    # exp10(x) = 1 + x*ln(10) + ..., |exp10(x) - 1| < 8|x|
    if guard.is_tiny(x.e + 3, digital.ONE, ctx):
        return guard.perturb(digital.ONE, not x.negative, ctx)

    def evaluate(wp):
        a = approx.Approx.exact(x).mul(constants.ln10_approx(wp + max(0, x.e) + 8))
        return logexp.exp_approx(a, wp)

    return guard.correctly_round(evaluate, ctx, op=OP.exp10)
