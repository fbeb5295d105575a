"""Approximations with rigorous error bounds.

An Approx (m, exp, err) stands for some unknown real number that lies in
the interval [(m - err) * 2**exp, (m + err) * 2**exp]. The evaluators produce
Approx values, and the guard controller decides from the width of the
interval whether enough precision was used to round correctly.
"""

from ..core import digital
from ..core.utils import PrecisionError


class Approx(object):

    def __init__(self, m, exp, err=0):
        if err < 0:
            raise ValueError('negative error bound {}'.format(repr(err)))
        self.m = int(m)
        self.exp = int(exp)
        self.err = int(err)

    @classmethod
    def exact(cls, x):
        """An Approx with no error, from a finite Digital."""
        if x.is_nar():
            raise ValueError('cannot approximate non-real value {}'.format(repr(x)))
        return cls(x.m, x.exp, 0)

    def __repr__(self):
        return '{}(m={}, exp={}, err={})'.format(type(self).__name__, repr(self.m), repr(self.exp), repr(self.err))

    @property
    def e(self):
        """Upper bound on the IEEE-style exponent of any value in the interval."""
        return (abs(self.m) + self.err).bit_length() + self.exp - 1

    def contains_zero(self):
        return abs(self.m) <= self.err

    def bounds(self):
        """The endpoints of the interval, as exact Digitals."""
        lo = digital.Digital(m=self.m - self.err, exp=self.exp)
        hi = digital.Digital(m=self.m + self.err, exp=self.exp)
        return lo, hi

    def at_exp(self, exp):
        """Return (m, err) rescaled to a given exponent.
        Shifting left is exact; shifting right truncates, and the error bound
        grows to cover the lost bits.
        """
        offset = self.exp - exp
        if offset >= 0:
            return self.m << offset, self.err << offset
        else:
            return self.m >> -offset, (self.err >> -offset) + 2

    def trim(self, prec):
        """Keep at most about prec significant bits."""
        extra = abs(self.m).bit_length() - prec
        if extra > 0:
            m, err = self.at_exp(self.exp + extra)
            return type(self)(m, self.exp + extra, err)
        else:
            return self

    def neg(self):
        return type(self)(-self.m, self.exp, self.err)

    def scale(self, n):
        """Multiply by 2**n, exactly."""
        return type(self)(self.m, self.exp + n, self.err)

    def add(self, other, prec=None):
        """Sum of two approximations. If prec is given, the smaller operand
        is not carried more than prec bits below the top of the larger one.
        """
        exp = min(self.exp, other.exp)
        if prec is not None:
            exp = max(exp, max(self.e, other.e) - prec)
        m1, err1 = self.at_exp(exp)
        m2, err2 = other.at_exp(exp)
        return type(self)(m1 + m2, exp, err1 + err2)

    def sub(self, other, prec=None):
        return self.add(other.neg(), prec=prec)

    def mul(self, other, prec=None):
        m1, m2 = self.m, other.m
        err = abs(m1) * other.err + abs(m2) * self.err + self.err * other.err
        result = type(self)(m1 * m2, self.exp + other.exp, err)
        if prec is None:
            return result
        else:
            return result.trim(prec)

    def div(self, other, prec):
        """Quotient of two approximations, with about prec bits.
        Raises PrecisionError if the divisor might be zero.
        """
        if other.contains_zero():
            raise PrecisionError('divisor {} might be zero'.format(repr(other)))

        m1, err1 = self.m, self.err
        m2, err2 = abs(other.m), other.err
        if other.m < 0:
            m1 = -m1

        shift = max(0, prec - abs(m1).bit_length() + m2.bit_length() + 2)
        q = (m1 << shift) // m2

        # |a/b - m1/m2| <= (err1*|m2| + |m1|*err2) / (|m2| * (|m2| - err2)),
        # plus one for the floor division
        num = (err1 * m2 + abs(m1) * err2) << shift
        den = m2 * (m2 - err2)
        err = -(-num // den) + 1

        return type(self)(q, self.exp - other.exp - shift, err)


ONE = Approx(1, 0, 0)
