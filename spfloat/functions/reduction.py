"""Range reduction for the log, exp and trig families.

Every reduction produces a ReductionState: the branch index chosen by the
reduction, the reduced argument as a fixed-point integer with wp fractional
bits, and a bound (in units of 2**-wp) on the error of that integer.
"""

import gmpy2 as gmp

from . import constants


class ReductionState(object):

    def __init__(self, branch, residual, wp, err):
        # k for log and exp, the quadrant for trig functions
        self.branch = branch
        self.residual = residual
        self.wp = wp
        self.err = err

    def __repr__(self):
        return '{}(branch={}, residual={}, wp={}, err={})'.format(
            type(self).__name__, repr(self.branch), repr(self.residual), repr(self.wp), repr(self.err))


def to_fixed(x, wp):
    """floor(|x| * 2**wp) for a finite Digital x, and whether it was exact."""
    offset = x.exp + wp
    if offset >= 0:
        return x.c << offset, True
    else:
        return x.c >> -offset, (x.c & ((1 << -offset) - 1)) == 0


def reduce_log(x, wp):
    """x = m * 2**k with m in [sqrt(1/2), sqrt(2)), for finite positive x.
    The residual is m.
    """
    c = x.c
    k = x.e
    # m = c / 2**(p-1) is in [1, 2); move it down if m >= sqrt(2)
    if c * c >= 1 << (2 * x.p - 1):
        k += 1
    offset = x.exp - k + wp
    if offset >= 0:
        m = c << offset
        err = 0
    else:
        m = c >> -offset
        err = 1
    return ReductionState(k, gmp.mpz(m), wp, err)


def reduce_exp(t, terr, wp):
    """t = n * ln(2) + r with r in [0, ln(2)), for a fixed-point argument t
    with wp fractional bits and error at most terr.
    """
    ln2 = constants.ln2_fixed(wp)
    n, r = divmod(t, ln2)
    # the error of ln2 is multiplied by n
    err = terr + constants.ERR * abs(n) + 1
    return ReductionState(int(n), gmp.mpz(r), wp, err)


def reduce_trig(x, wp):
    """|x| = q * (pi/2) + r with r in [0, pi/2), for a finite Digital x.
    The sign of x is ignored: callers apply the symmetry of their function.
    The branch is q mod 4. If r lands close to 0 or pi/2, pi is recomputed
    with more bits, so that neither sin(r) nor cos(r) loses more than a few
    bits to cancellation. The residual has wp or more fractional bits:
    the actual precision is recorded in the state.
    """
    mag = x.e + 1
    if mag <= 0:
        # |x| < 1 < pi/2: nothing to reduce
        t, exact = to_fixed(x, wp)
        return ReductionState(0, gmp.mpz(t), wp, 0 if exact else 1)

    i = 0
    while True:
        cancellation = 20 << i
        wpmod = wp + mag + cancellation
        pi2 = constants.pi_fixed(wpmod - 1)
        pi4 = pi2 >> 1
        t = to_fixed(x, wpmod)[0]
        n, y = divmod(t, pi2)
        if y > pi4:
            small = pi2 - y
        else:
            small = y
        if small >> (wp + mag - 10):
            break
        i += 1

    # |n| < 2**(mag+1), so the error of pi2 contributes at most
    # 2**(mag+2) units before the final shift
    err_units = constants.ERR * abs(n) + 2
    residual = y >> mag
    err = (err_units >> mag) + 2
    return ReductionState(int(n) % 4, gmp.mpz(residual), wpmod - mag, err)
