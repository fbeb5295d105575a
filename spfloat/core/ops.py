"""Standard rounding modes and operation codes."""

from enum import IntEnum, unique

class RM(IntEnum):
    ROUND_NEAREST_EVEN = 0
    RNE = 0
    ROUND_NEAREST_AWAY = 1
    RNA = 1
    ROUND_UP = 2
    RTP = 2
    ROUND_DOWN = 3
    RTN = 3
    ROUND_TO_ZERO = 4
    RTZ = 4
    ROUND_AWAY_ZERO = 5
    RAZ = 5

@unique
class OP(IntEnum):
    # arithmetic substrate, provided by MPFR
    add = 0
    sub = 1
    mul = 2
    div = 3
    neg = 4
    sqrt = 5
    fabs = 6
    # special functions, evaluated by spfloat.functions
    log = 10
    log2 = 11
    log10 = 12
    log1p = 13
    exp = 14
    exp2 = 15
    exp10 = 16
    expm1 = 17
    sin = 18
    cos = 19
    tan = 20
    sec = 21
    csc = 22
    cot = 23
    acos = 24
    asin = 25
    atan = 26
    sinh = 27
    cosh = 28
    tanh = 29
    sech = 30
    csch = 31
    coth = 32
    asinh = 33
    acosh = 34
    atanh = 35
    atan2 = 36
