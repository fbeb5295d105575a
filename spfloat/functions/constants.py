"""Mathematical constants (pi, ln(2), ln(10)) as fixed-point integers,
with a thread-safe single-flight cache.

The fixed-point functions return floor(C * 2**prec) up to an error of at most
ERR units in the last place.
"""

import logging
import math
import threading

import gmpy2 as gmp

from ..arithmetic import evalctx
from . import approx
from . import guard

logger = logging.getLogger(__name__)

# error bound, in units in the last place, of every cached fixed-point constant
ERR = 2

# cached precisions are rounded up to a multiple of this
BUCKET_BITS = 64

# bits computed beyond the requested precision, to absorb the series' own error
EXTRA_BITS = 20


class _Flight(object):
    """A computation in progress, which other threads can wait on."""

    def __init__(self):
        self._done = threading.Event()
        self._value = None
        self._error = None

    def finish(self, value):
        self._value = value
        self._done.set()

    def fail(self, error):
        self._error = error
        self._done.set()

    def wait(self):
        self._done.wait()
        if self._error is not None:
            raise self._error
        return self._value


class ConstantCache(object):
    """Memo table for fixed-point constants, keyed by (name, precision bucket).

    At most one computation runs for each key: concurrent callers asking for
    the same key wait for the first caller's result. A value computed at a
    higher precision serves every lower precision by truncation. If a
    computation fails, every waiter sees the error and the key is cleared so
    that a later call can try again.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values = {}
        self._flights = {}

    def get(self, name, compute, prec):
        bucket = -(-prec // BUCKET_BITS) * BUCKET_BITS
        key = (name, bucket)

        with self._lock:
            cached = self._values.get(name)
            if cached is not None and cached[0] >= prec:
                cached_prec, value = cached
                return value >> (cached_prec - prec)
            flight = self._flights.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._flights[key] = flight

        if not leader:
            value = flight.wait()
            return value >> (bucket - prec)

        logger.debug('computing %s to %d bits', name, bucket)
        try:
            value = compute(bucket)
        except BaseException as e:
            with self._lock:
                del self._flights[key]
            flight.fail(e)
            raise

        with self._lock:
            cached = self._values.get(name)
            if cached is None or cached[0] < bucket:
                self._values[name] = (bucket, value)
            del self._flights[key]
        flight.finish(value)

        return value >> (bucket - prec)

    def clear(self):
        with self._lock:
            self._values.clear()


_cache = ConstantCache()


# bsp_acot, acot_fixed, machin and bs_chudnovsky are adapted from mpmath
# (mpmath/libmp/libelefun.py), copyright Fredrik Johansson and the mpmath
# contributors, distributed under the BSD license.

def bsp_acot(q, a, b, hyperbolic):
    if b - a == 1:
        a1 = gmp.mpz(2*a + 3)
        if hyperbolic or a&1:
            return gmp.mpz(1), a1 * q**2, a1
        else:
            return gmp.mpz(-1), a1 * q**2, a1
    m = (a+b)//2
    p1, q1, r1 = bsp_acot(q, a, m, hyperbolic)
    p2, q2, r2 = bsp_acot(q, m, b, hyperbolic)
    return q2*p1 + r1*p2, q1*q2, r1*r2


def acot_fixed(a, prec, hyperbolic):
    """Compute acot(a) or acoth(a) for an integer a with binary splitting."""
    # the series converges like the geometric series for 1/a^2
    N = int(0.35 * prec/math.log(a) + 20)
    p, q, r = bsp_acot(a, 0, N, hyperbolic)
    return ((p+q) << prec)//(q*a)


def machin(coefs, prec, hyperbolic=False):
    """Evaluate a Machin-like formula, i.e. a linear combination
    c*acot[h](n) + ... given as a list [(c, n), ...], in fixed point.
    """
    extraprec = 10
    s = gmp.mpz(0)
    for a, b in coefs:
        s += gmp.mpz(a) * acot_fixed(gmp.mpz(b), prec+extraprec, hyperbolic)
    return (s >> extraprec)


# Chudnovsky series:
#   1/(12 pi) = sum_k (-1)^k (6k)! (A + B k) / ((3k)! (k!)^3 C^(3k+3/2))
CHUD_A = gmp.mpz(13591409)
CHUD_B = gmp.mpz(545140134)
CHUD_C = gmp.mpz(640320)
CHUD_D = gmp.mpz(12)


def bs_chudnovsky(a, b):
    """Sum the Chudnovsky series from a to b. Returns g, p, q where p/q
    is the exact partial sum and g is kept for the recursive calls.
    """
    if b-a == 1:
        g = gmp.mpz((6*b-5)*(2*b-1)*(6*b-1))
        p = b**3 * CHUD_C**3 // 24
        q = (-1)**b * g * (CHUD_A+CHUD_B*b)
    else:
        mid = (a+b)//2
        g1, p1, q1 = bs_chudnovsky(a, mid)
        g2, p2, q2 = bs_chudnovsky(mid, b)
        p = p1*p2
        g = g1*g2
        q = q1*p2 + q2*g1
    return g, p, q


def _compute_pi(prec):
    wp = prec + EXTRA_BITS
    # about 14.18 digits per term
    N = int(wp/3.3219280948/14.181647462 + 2)
    g, p, q = bs_chudnovsky(0, N)
    sqrtC = gmp.isqrt(CHUD_C << (2*wp))
    v = p*CHUD_C*sqrtC//((q+CHUD_A*p)*CHUD_D)
    return v >> EXTRA_BITS


def _compute_ln2(prec):
    return machin([(18, 26), (-2, 4801), (8, 8749)], prec + EXTRA_BITS, True) >> EXTRA_BITS


def _compute_ln10(prec):
    return machin([(46, 31), (34, 49), (20, 161)], prec + EXTRA_BITS, True) >> EXTRA_BITS


def pi_fixed(prec):
    """floor(pi * 2**prec), within ERR."""
    return _cache.get('pi', _compute_pi, prec)


def ln2_fixed(prec):
    """floor(ln(2) * 2**prec), within ERR."""
    return _cache.get('ln2', _compute_ln2, prec)


def ln10_fixed(prec):
    """floor(ln(10) * 2**prec), within ERR."""
    return _cache.get('ln10', _compute_ln10, prec)


def pi_approx(prec):
    return approx.Approx(pi_fixed(prec), -prec, ERR)


def ln2_approx(prec):
    return approx.Approx(ln2_fixed(prec), -prec, ERR)


def ln10_approx(prec):
    return approx.Approx(ln10_fixed(prec), -prec, ERR)


# correctly rounded constants

def pi(ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    return guard.correctly_round(pi_approx, ctx)


def pi_multiple(ctx=None, n=1, scale=0, negative=False):
    """n * pi * 2**scale, correctly rounded."""
    ctx = evalctx.resolve_ctx(ctx)
    if negative:
        k = approx.Approx(-n, scale)
    else:
        k = approx.Approx(n, scale)
    return guard.correctly_round(lambda wp: pi_approx(wp).mul(k), ctx)


def half_pi(ctx=None, negative=False):
    return pi_multiple(ctx, 1, -1, negative)


def ln2(ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    return guard.correctly_round(ln2_approx, ctx)


def ln10(ctx=None):
    ctx = evalctx.resolve_ctx(ctx)
    return guard.correctly_round(ln10_approx, ctx)
