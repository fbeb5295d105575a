"""Special-value classification, and the special-value tables of each function.

Every function first classifies its operand. NaN, the infinities, zeros
and any operand outside the function's domain are resolved here from a
table, without evaluating anything; only finite nonzero operands in the
domain reach the evaluators.
"""

from enum import IntEnum, unique

from ..core import digital
from ..core.ops import OP
from . import constants


@unique
class SpecialValue(IntEnum):
    FINITE = 0
    NAN = 1
    POSITIVE_INFINITY = 2
    NEGATIVE_INFINITY = 3
    # the sign of a zero stays on the operand
    ZERO = 4


def classify(x):
    if x.isnan:
        return SpecialValue.NAN
    elif x.isinf:
        if x.negative:
            return SpecialValue.NEGATIVE_INFINITY
        else:
            return SpecialValue.POSITIVE_INFINITY
    elif x.is_zero():
        return SpecialValue.ZERO
    else:
        return SpecialValue.FINITE


class _Same(object):
    """Table entry: the result is the operand itself (keeping a zero's sign)."""

    def __repr__(self):
        return 'SAME'

SAME = _Same()


def _half_pi(x, ctx):
    return constants.half_pi(ctx)

def _neg_half_pi(x, ctx):
    return constants.half_pi(ctx, negative=True)

def _signed_inf(x, ctx):
    return digital.Digital(negative=x.negative, isinf=True)


NAN = digital.NAN
POS_INF = digital.POS_INF
NEG_INF = digital.NEG_INF
POS_ZERO = digital.POS_ZERO
NEG_ZERO = digital.NEG_ZERO
ONE = digital.ONE
NEG_ONE = digital.NEG_ONE


def _periodic(zero):
    # trig functions have no limit at either infinity
    return {
        SpecialValue.NEGATIVE_INFINITY: NAN,
        SpecialValue.POSITIVE_INFINITY: NAN,
        SpecialValue.ZERO: zero,
    }

# op -> {class: result}
special_tables = {
    OP.log: {
        SpecialValue.NEGATIVE_INFINITY: NAN,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: NEG_INF,
    },
    OP.log1p: {
        SpecialValue.NEGATIVE_INFINITY: NAN,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: SAME,
    },
    OP.exp: {
        SpecialValue.NEGATIVE_INFINITY: POS_ZERO,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: ONE,
    },
    OP.expm1: {
        SpecialValue.NEGATIVE_INFINITY: NEG_ONE,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: SAME,
    },
    OP.sin: _periodic(SAME),
    OP.cos: _periodic(ONE),
    OP.acos: _periodic(_half_pi),
    OP.asin: _periodic(SAME),
    OP.atan: {
        SpecialValue.NEGATIVE_INFINITY: _neg_half_pi,
        SpecialValue.POSITIVE_INFINITY: _half_pi,
        SpecialValue.ZERO: SAME,
    },
    OP.sinh: {
        SpecialValue.NEGATIVE_INFINITY: NEG_INF,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: SAME,
    },
    OP.cosh: {
        SpecialValue.NEGATIVE_INFINITY: POS_INF,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: ONE,
    },
    OP.tanh: {
        SpecialValue.NEGATIVE_INFINITY: NEG_ONE,
        SpecialValue.POSITIVE_INFINITY: ONE,
        SpecialValue.ZERO: SAME,
    },
    OP.sech: {
        SpecialValue.NEGATIVE_INFINITY: POS_ZERO,
        SpecialValue.POSITIVE_INFINITY: POS_ZERO,
        SpecialValue.ZERO: ONE,
    },
    OP.csch: {
        SpecialValue.NEGATIVE_INFINITY: NEG_ZERO,
        SpecialValue.POSITIVE_INFINITY: POS_ZERO,
        SpecialValue.ZERO: _signed_inf,
    },
    OP.coth: {
        SpecialValue.NEGATIVE_INFINITY: NEG_ONE,
        SpecialValue.POSITIVE_INFINITY: ONE,
        SpecialValue.ZERO: _signed_inf,
    },
    OP.asinh: {
        SpecialValue.NEGATIVE_INFINITY: NEG_INF,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: SAME,
    },
    OP.acosh: {
        SpecialValue.NEGATIVE_INFINITY: NAN,
        SpecialValue.POSITIVE_INFINITY: POS_INF,
        SpecialValue.ZERO: NAN,
    },
    OP.atanh: {
        SpecialValue.NEGATIVE_INFINITY: NAN,
        SpecialValue.POSITIVE_INFINITY: NAN,
        SpecialValue.ZERO: SAME,
    },
}

# op -> predicate on finite nonzero operands that are outside the domain
_domain_violations = {
    OP.log: lambda x: x.negative,
    OP.log1p: lambda x: x < NEG_ONE,
    OP.acos: lambda x: x.e >= 0 and (x > ONE or x < NEG_ONE),
    OP.asin: lambda x: x.e >= 0 and (x > ONE or x < NEG_ONE),
    OP.acosh: lambda x: x < ONE,
    OP.atanh: lambda x: x.e >= 0 and (x > ONE or x < NEG_ONE),
}


def special_case(op, x, ctx):
    """Resolve op(x) from the special-value table.
    Returns None if x is finite, nonzero and inside the domain of op,
    in which case the result has to be computed.
    """
    cls = classify(x)
    if cls is SpecialValue.NAN:
        return NAN

    if cls is SpecialValue.FINITE:
        violated = _domain_violations.get(op)
        if violated is not None and violated(x):
            return NAN
        else:
            return None

    result = special_tables[op][cls]
    if result is SAME:
        return digital.Digital(x)
    elif callable(result):
        return result(x, ctx)
    else:
        return result


# re-classification of intermediate results in compositions

def _is_inf(cls):
    return cls is SpecialValue.POSITIVE_INFINITY or cls is SpecialValue.NEGATIVE_INFINITY


def quotient_class(a, b):
    """The special value of a / b, or None if both are finite and nonzero."""
    ca = classify(a)
    cb = classify(b)
    negative = a.negative != b.negative

    if ca is SpecialValue.NAN or cb is SpecialValue.NAN:
        return NAN
    elif _is_inf(ca) and _is_inf(cb):
        return NAN
    elif ca is SpecialValue.ZERO and cb is SpecialValue.ZERO:
        return NAN
    elif _is_inf(ca) or cb is SpecialValue.ZERO:
        # a pole: the sign comes from the operands, including the sign of a zero
        return digital.Digital(negative=negative, isinf=True)
    elif _is_inf(cb) or ca is SpecialValue.ZERO:
        return digital.Digital(negative=negative, c=0, exp=0)
    else:
        return None



def atan2_class(y, x, ctx):
    """The value of atan2(y, x) when either operand is NaN, infinite or zero,
    or None if both are finite and nonzero.
    """
    cy = classify(y)
    cx = classify(x)
    negative = y.negative

    if cy is SpecialValue.NAN or cx is SpecialValue.NAN:
        return NAN
    elif cy is SpecialValue.ZERO:
        # x < 0, and also x = -0, turns a zero y into +-pi
        if x.negative:
            return constants.pi_multiple(ctx, 1, 0, negative)
        else:
            return digital.Digital(y)
    elif _is_inf(cy):
        if cx is SpecialValue.POSITIVE_INFINITY:
            return constants.pi_multiple(ctx, 1, -2, negative)
        elif cx is SpecialValue.NEGATIVE_INFINITY:
            return constants.pi_multiple(ctx, 3, -2, negative)
        else:
            return constants.pi_multiple(ctx, 1, -1, negative)
    elif cx is SpecialValue.ZERO:
        return constants.pi_multiple(ctx, 1, -1, negative)
    elif cx is SpecialValue.POSITIVE_INFINITY:
        return digital.Digital(negative=negative, c=0, exp=0)
    elif cx is SpecialValue.NEGATIVE_INFINITY:
        return constants.pi_multiple(ctx, 1, 0, negative)
    else:
        return None
