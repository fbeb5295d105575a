"""Conversions between some common numeric types (float, np.floatXX) and
universal m/exp notation, including the IEEE 754 special values.
"""


import sys

import numpy as np

from .utils import bitmask
from .ops import RM
from . import digital


# Binary conversions are relatively simple for numpy's floating point types.
# float16 : w = 5,  p = 11
# float32 : w = 8,  p = 24
# float64 : w = 11, p = 53

# ftype -> (w, p, nbytes)
_formats = {
    float: (11, 53, 8),
    np.float16: (5, 11, 2),
    np.float32: (8, 24, 4),
    np.float64: (11, 53, 8),
}


def np_byteorder(ftype):
    """Converts from numpy byteorder conventions for a floating point datatype
    to sys.byteorder 'big' or 'little'.
    """
    bo = np.dtype(ftype).byteorder
    if bo == '=':
        return sys.byteorder
    elif bo == '<':
        return 'little'
    elif bo == '>':
        return 'big'
    else:
        raise ValueError('unknown numpy byteorder {} for dtype {}'.format(repr(bo), repr(ftype)))


def _format_of(ftype):
    try:
        return _formats[ftype]
    except KeyError:
        raise TypeError('expected float or np.float{{16,32,64}}, got {}'.format(repr(ftype)))


def float_to_bits(f):
    """Split a python or numpy float into its sign, biased exponent and fraction fields,
    along with the format parameters w and pbits.
    """
    if isinstance(f, float):
        f = np.float64(f)
    ftype = type(f)
    w, p, nbytes = _format_of(ftype)
    pbits = p - 1

    bits = int.from_bytes(f.tobytes(), np_byteorder(ftype))

    S = bits >> (w + pbits) & bitmask(1)
    E = bits >> (pbits) & bitmask(w)
    C = bits & bitmask(pbits)

    return S, E, C, w, pbits


def float_to_mantissa_exp(f):
    """Converts a python or numpy float into universal m, exp representation:
    f = m * 2**e. If the float does not represent a real number (i.e. it is inf
    or NaN) this will raise an exception.
    """
    S, E, C, w, pbits = float_to_bits(f)
    emax = (1 << (w - 1)) - 1

    if E == 0:
        # subnormal
        c = C
        exp = -emax - pbits + 1
    elif E < bitmask(w):
        # normal
        c = C | (1 << pbits)
        exp = E - emax - pbits
    else:
        # nonreal
        raise ValueError('nonfinite value {}'.format(repr(f)))

    if S == 0:
        return c, exp
    else:
        return -c, exp


def float_to_digital(f):
    """Converts a python or numpy float into a Digital, exactly.
    NaN, the infinities and both signed zeros are preserved.
    """
    S, E, C, w, pbits = float_to_bits(f)
    negative = (S == 1)

    if E == bitmask(w):
        if C == 0:
            return digital.Digital(negative=negative, isinf=True)
        else:
            return digital.Digital(isnan=True)

    m, exp = float_to_mantissa_exp(f)
    if m == 0:
        return digital.Digital(negative=negative, c=0, exp=0)
    else:
        return digital.Digital(m=m, exp=exp)


def float_from_bits(S, E, C, ftype=float):
    w, p, nbytes = _format_of(ftype)
    pbits = p - 1

    f = np.frombuffer(
        ((S << (w + pbits)) | (E << pbits) | C).to_bytes(nbytes, np_byteorder(ftype)),
        dtype=(np.float64 if ftype == float else ftype), count=1, offset=0,
    )[0]

    if ftype == float:
        return float(f)
    else:
        return f


def digital_to_float(x, ftype=float, rm=RM.RNE):
    """Round a Digital to the nearest value of a python or numpy float type,
    with gradual underflow and overflow to infinity (or to the largest finite
    value, if the rounding mode points toward zero).
    NaN, the infinities and both signed zeros are preserved.
    """
    w, p, nbytes = _format_of(ftype)
    pbits = p - 1
    emax = (1 << (w - 1)) - 1
    emin = 1 - emax
    S = 1 if x.negative else 0

    if x.isnan:
        # canonical quiet NaN
        return float_from_bits(0, bitmask(w), 1 << (pbits - 1), ftype)
    elif x.isinf:
        return float_from_bits(S, bitmask(w), 0, ftype)
    elif x.is_zero():
        return float_from_bits(S, 0, 0, ftype)

    rounded = x.round_new(max_p=p, min_n=emin - p, rm=rm)

    if rounded.is_zero():
        return float_from_bits(S, 0, 0, ftype)

    c = rounded.c
    e = rounded.e

    if e > emax:
        if rm in (RM.RNE, RM.RNA) or digital.Digital.rounds_away(x.negative, rm):
            return float_from_bits(S, bitmask(w), 0, ftype)
        else:
            return float_from_bits(S, bitmask(w) - 1, bitmask(pbits), ftype)
    elif e < emin:
        # subnormal: rounding to min_n already removed the extra bits
        E = 0
        C = c << (rounded.exp - (emin - pbits))
    else:
        E = e + emax
        C = (c << (p - c.bit_length())) & bitmask(pbits)

    return float_from_bits(S, E, C, ftype)


# Mini format datasheet.
# For all formats:
#   emax = (1 << (w - 1)) - 1
#   emin = 1 - emax
#   n = emin - p

# numpy.float64 or float:
#   w = 11, p = 53, emax = 1023, emin = -1022, n = -1075
# numpy.float32:
#   w = 8, p = 24, emax = 127, emin = -126, n = -150
# numpy.float16
#   w = 5, p = 11, emax = 15, emin = -14, n = -25
