"""Guard-digit control: evaluate at boosted precision, then round once.

The evaluators return Approx intervals. If both ends of an interval round to
the same value, that value is the correctly rounded result; otherwise the
working precision is increased and the evaluation repeats (Ziv's strategy).
This only terminates if the exact result is not itself representable, so the
callers detect exactly representable results before they get here.
"""

import logging

from ..core import digital
from ..core.ops import RM
from ..core.utils import PrecisionError, bitmask

logger = logging.getLogger(__name__)

# extra bits used on the first attempt
GUARD_BITS = 16


def _same_rounding(a, b):
    return a.c == b.c and a.exp == b.exp and a.negative == b.negative


def correctly_round(evaluate, ctx, hint=0, op=None):
    """Call evaluate(wp) with increasing working precision wp until the
    Approx it returns determines a single rounded result in ctx.

    hint is the number of bits of cancellation the caller expects, which is
    added to the first working precision.
    """
    wp = ctx.p + GUARD_BITS + max(0, hint)
    while True:
        try:
            approx = evaluate(wp)
        except PrecisionError as e:
            logger.debug('%s: %s at %d bits, retrying', _name(op), e, wp)
        else:
            lo, hi = approx.bounds()
            rounded_lo = lo.round_new(max_p=ctx.p, rm=ctx.rm)
            rounded_hi = hi.round_new(max_p=ctx.p, rm=ctx.rm)
            if _same_rounding(rounded_lo, rounded_hi):
                result = digital.Digital(rounded_lo, inexact=True, rounded=True)
                return enforce_range(result, ctx)
            logger.debug('%s: error bound too wide at %d bits, retrying', _name(op), wp)
        wp += max(wp // 2, GUARD_BITS)


def _name(op):
    if op is None:
        return 'evaluate'
    else:
        return op.name


def round_digital(x, ctx):
    """Round a Digital (exact, or carrying a sticky bit) to ctx."""
    if x.is_nar() or x.is_zero():
        return digital.Digital(x)
    return enforce_range(x.round_new(max_p=ctx.p, rm=ctx.rm), ctx)


def perturb(x, away, ctx):
    """Round x nudged by an infinitesimal amount, either away from zero
    or toward zero. This is correct for any true value strictly between
    x and x +/- one unit in the position just below x's last bit. x is
    widened to at least ctx.p + 3 bits, and always by at least one bit, so
    the nudged significand is odd: it is never a value with ctx.p bits,
    and never a tie even when it drops into the binade below x.
    """
    g = max(1, ctx.p + 3 - x.p)
    if away:
        c = (x.c << g) + 1
    else:
        c = (x.c << g) - 1
    nudged = digital.Digital(x, c=c, exp=x.exp - g, inexact=True)
    result = nudged.round_new(max_p=ctx.p, rm=ctx.rm)
    return enforce_range(digital.Digital(result, inexact=True), ctx)


def is_tiny(correction_e, leading, ctx):
    """Can a correction term with magnitude below 2**correction_e be
    handled by perturbing the leading term?
    """
    return correction_e < leading.e - max(ctx.p, leading.p) - 2


def largest_finite(negative, ctx):
    return digital.Digital(negative=negative, c=bitmask(ctx.p), exp=ctx.emax - ctx.p + 1,
                           inexact=True, rounded=True)


def smallest_nonzero(negative, ctx):
    return digital.Digital(negative=negative, c=1 << (ctx.p - 1), exp=ctx.emin - ctx.p + 1,
                           inexact=True, rounded=True)


def overflow(negative, ctx):
    if ctx.rm in (RM.RNE, RM.RNA) or digital.Digital.rounds_away(negative, ctx.rm):
        return digital.Digital(negative=negative, isinf=True, inexact=True, rounded=True)
    else:
        return largest_finite(negative, ctx)


def underflow(negative, ctx):
    if digital.Digital.rounds_away(negative, ctx.rm):
        return smallest_nonzero(negative, ctx)
    else:
        return digital.Digital(negative=negative, c=0, exp=0, inexact=True, rounded=True)


def enforce_range(x, ctx):
    """Apply the exponent range of ctx to a rounded result."""
    if x.is_nar() or x.is_zero():
        return x
    if x.e > ctx.emax:
        return overflow(x.negative, ctx)
    elif x.e < ctx.emin:
        return underflow(x.negative, ctx)
    else:
        return x
