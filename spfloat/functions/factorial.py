"""Factorial, as an exact integer or rounded to a context."""

import numbers

import gmpy2 as gmp

from ..core import digital
from ..core.utils import DomainError, shift
from ..arithmetic import evalctx
from . import guard

# ranges of at most this many factors are multiplied directly
FACT_BASECASE = 16


def product_range(lo, hi):
    """The product of the integers in [lo, hi), by binary splitting."""
    if hi - lo <= FACT_BASECASE:
        result = gmp.mpz(1)
        for i in range(lo, hi):
            result *= i
        return result
    else:
        mid = (lo + hi) // 2
        return product_range(lo, mid) * product_range(mid, hi)


def _to_index(n):
    if isinstance(n, digital.Digital):
        if n.is_nar() or not n.is_integer():
            raise DomainError('factorial of non-integer {}'.format(repr(n)))
        k = shift(n.m, n.exp)
    elif isinstance(n, numbers.Integral):
        k = int(n)
    elif isinstance(n, numbers.Real):
        f = float(n)
        if not f.is_integer():
            raise DomainError('factorial of non-integer {}'.format(repr(n)))
        k = int(f)
    else:
        raise TypeError('factorial of unsupported type {}'.format(type(n).__name__))

    if k < 0:
        raise DomainError('factorial of negative integer {}'.format(repr(n)))
    return k


def fact(n):
    """n! as an exact integer.
    n can be an int, an integer-valued float or an integral Digital.
    """
    k = _to_index(n)
    return int(product_range(1, k + 1))


def fact_rounded(n, ctx=None):
    """n! rounded to ctx."""
    ctx = evalctx.resolve_ctx(ctx)
    return guard.round_digital(digital.Digital(c=fact(n), exp=0), ctx)
