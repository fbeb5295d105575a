"""The correctly-rounded arithmetic substrate (+-*/ sqrt)
implemented with GMP/MPFR as a backend, and exact decimal output.
"""


import gmpy2 as gmp

from . import digital
from .ops import OP


def _exact_context(prec, emin, emax):
    return gmp.context(
        precision=prec,
        emin=emin,
        emax=emax,
        trap_underflow=True,
        trap_overflow=True,
        trap_inexact=True,
        trap_invalid=True,
        trap_erange=True,
        trap_divzero=True,
    )


def _working_context(prec):
    return gmp.context(
        # two extra bits, plus a sticky bit from the result code,
        # so that we can round from RTZ to any other mode
        precision=prec + 2,
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        trap_underflow=True,
        trap_overflow=True,
        # inexact and invalid operations should not be a problem
        trap_inexact=False,
        trap_invalid=False,
        trap_erange=False,
        trap_divzero=False,
        # use RTZ for easy multiple rounding later
        round=gmp.RoundToZero,
    )


def digital_to_mpfr(x):
    """Convert a Digital to an mpfr, exactly."""
    if x.isnan:
        return gmp.nan()
    elif x.isinf:
        if x.negative:
            return -gmp.inf()
        else:
            return gmp.inf()

    c = x.c
    exp = x.exp

    cbits = c.bit_length()
    ebits = exp.bit_length()

    # Multiplying a small precision 0 by a huge scale is troublesome in gmpy2,
    # so special-case zero away entirely.
    if cbits == 0:
        with _exact_context(2, -1, 1):
            if x.negative:
                return -gmp.zero()
            else:
                return gmp.zero()

    with _exact_context(max(2, ebits), min(-1, exp), max(1, ebits, exp + 1)):
        scale = gmp.exp2(exp)

    with _exact_context(max(2, cbits), min(-1, exp), max(1, cbits, exp + cbits)):
        significand = gmp.mpfr(c)
        if x.negative:
            return -gmp.mul(significand, scale)
        else:
            return gmp.mul(significand, scale)


def mpfr_to_digital(x, sticky=True):
    """Convert an mpfr (computed with round to zero) to a Digital.
    If the mpfr is inexact, a sticky bit is appended to the significand,
    so that the result can be rounded again correctly in any mode.
    With sticky=False the value of the mpfr is taken as exact.
    """
    if gmp.is_nan(x):
        return digital.Digital(isnan=True)

    negative = gmp.is_signed(x)

    if gmp.is_infinite(x):
        return digital.Digital(negative=negative, isinf=True)

    if gmp.is_zero(x):
        return digital.Digital(negative=negative, c=0, exp=0)

    m, exp = x.as_mantissa_exp()
    c = int(abs(m))
    exp = int(exp)

    inexact = sticky and x.rc != 0
    if inexact:
        c = (c << 1) | 1
        exp -= 1

    return digital.Digital(negative=negative, c=c, exp=exp, inexact=inexact)


gmp_ops = {
    OP.add: gmp.add,
    OP.sub: gmp.sub,
    OP.mul: gmp.mul,
    OP.div: gmp.div,
    OP.neg: lambda x: -x,
    OP.sqrt: gmp.sqrt,
    OP.fabs: lambda x: abs(x),
}


def compute(opcode, *args, prec=53):
    """Compute op(*args), with up to prec bits of precision.
    op is specified via opcode, and arguments are universal digital numbers.
    Arguments are treated as exact.
    Result is truncated towards 0, but carries enough extra bits (and a sticky bit)
    to be rounded to prec bits in any rounding mode.
    Only the arithmetic substrate is computed here; the special functions
    live in spfloat.functions.
    """
    try:
        op = gmp_ops[opcode]
    except KeyError:
        raise ValueError('unsupported substrate operation {}'.format(repr(opcode)))

    inputs = [digital_to_mpfr(arg) for arg in args]
    # gmpy2 really doesn't like it when you pass nan as an argument
    for f in inputs:
        if gmp.is_nan(f):
            return mpfr_to_digital(f)

    with _working_context(prec):
        result = op(*inputs)

    return mpfr_to_digital(result)


def compute_string(s, prec=53):
    """Parse a decimal (or special) string with MPFR, to prec bits.
    The result is prepared for rounding like the result of compute().
    """
    with _working_context(prec):
        try:
            result = gmp.mpfr(s)
        except ValueError:
            raise ValueError('invalid numeric literal {}'.format(repr(s)))
    return mpfr_to_digital(result)


# helpful constants we don't need to constantly redefine
_mpz_2 = gmp.mpz(2)
_mpz_5 = gmp.mpz(5)
_mpz_10 = gmp.mpz(10)


class Dec(object):
    """Exact decimal representation of a number, with support for rounding.
    Intended for printing decimal strings.
    """

    # raw parameters
    _negative = False
    _c = 0
    _exp = 0

    # cached parameters: only access through properties
    _s = None
    _digits = None

    @property
    def negative(self):
        """The sign: is this number less than zero?"""
        return self._negative

    @property
    def c(self):
        """The unsigned significand of the decimal."""
        return self._c

    @property
    def exp(self):
        """The (decimal) exponent of the decimal."""
        return self._exp

    @property
    def s(self):
        """The string representation of the significand of this decimal."""
        if self._s is None:
            self._s = str(self._c)
        return self._s

    @property
    def digits(self):
        """The number of digits in the significand of this decimal."""
        if self._digits is None:
            if self._c == 0:
                self._digits = 0
            else:
                self._digits = len(self.s)
        return self._digits

    @property
    def e(self):
        """The scientific notation-style exponent of this decimal (as in 100 = 1.00e2)."""
        if self.digits == 0:
            return self._exp
        else:
            return self._exp + self.digits - 1

    @property
    def estring(self):
        """The string representation of this decimal, in scientific (%e) notation."""
        if self.e >= 0:
            expstr = 'e+' + str(self.e)
        else:
            expstr = 'e' + str(self.e)

        s = self.s
        if len(s) > 1:
            body = s[:1] + '.' + s[1:]
        else:
            body = s
        if self._negative:
            return '-' + body + expstr
        else:
            return body + expstr

    @property
    def string(self):
        """The string representation of this decimal, in decimal (%f) notation."""
        if self._c == 0:
            body = '0'
        elif self._exp >= 0:
            body = self.s + ('0' * self._exp)
        else:
            s = self.s
            if self.digits <= -self._exp:
                body = '0.' + ('0' * -(self.digits + self._exp)) + s
            else:
                body = s[:self._exp] + '.' + s[self._exp:]
        if self._negative:
            return '-' + body
        else:
            return body

    def __init__(self, x=None, tens=None, negative=None):
        """Create a new decimal from a digital number (one argument)
        or from a particular significand and decimal exponent (two arguments, in that order).
        """
        if tens is None and negative is None:
            if x is None:
                self._negative = False
                self._c = 0
                self._exp = 0

            else:
                if x.is_nar():
                    raise ValueError('cannot represent {} as a decimal'.format(repr(x)))
                self._negative = x.negative
                if x.is_zero():
                    self._c = 0
                    self._exp = 0
                else: # x is a nonzero digital
                    c = gmp.mpz(x.c)
                    c2, twos = gmp.remove(c, 2)
                    exp2 = x.exp + twos
                    # at this point, x == c2 * (2**exp2)

                    if exp2 >= 0:
                        self._c = int(c2 * (_mpz_2 ** exp2))
                        self._exp = 0
                    else:
                        # x == (c2 * (5**-exp2)) / (10**-exp2)
                        self._c = int(c2 * (_mpz_5 ** -exp2))
                        self._exp = exp2

        elif x is not None and tens is not None:
            # if negative is not given, then the decimal will be positive
            self._negative = bool(negative)
            self._c = int(x)
            self._exp = int(tens)

        else:
            raise ValueError('invalid arguments for Dec: x={}, tens={}, negative={}'
                             .format(repr(x), repr(tens), repr(negative)))

    def __repr__(self):
        return type(self).__name__ + '(' + repr(self._c) + ', ' + repr(self._exp) + ', negative=' + repr(self._negative) + ')'

    def __str__(self):
        return self.string

    def round(self, p):
        """Round to exactly p significant digits, to nearest with ties to even."""
        digits = self.digits

        if digits <= p:
            offset = p - digits
            return Dec(self.c * (10 ** offset), self.exp - offset, negative=self.negative)

        offset = digits - p
        scale = _mpz_10 ** offset
        new_exp = self.exp + offset

        floor, rem = gmp.f_divmod(self.c, scale)
        halfrem = 2 * rem - scale

        if halfrem < 0 or (halfrem == 0 and gmp.is_even(floor)):
            return Dec(floor, new_exp, negative=self.negative)

        new_c = floor + 1
        attempt = Dec(new_c, new_exp, negative=self.negative)
        if attempt.digits > p:
            # carried into a new digit, like 999 -> 1000
            attempt = Dec(gmp.f_div(new_c, 10), new_exp + 1, negative=self.negative)
        return attempt
