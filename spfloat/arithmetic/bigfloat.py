"""Arbitrary-precision binary floating-point numbers.
"""

import numbers

import gmpy2 as gmp
import numpy as np

from ..core import conversion
from ..core import digital
from ..core import gmpmath
from ..functions import factorial
from ..functions import guard
from . import evalctx
from . import mpnum


_mpfr_type = type(gmp.mpfr(0))


def _ingest(x, ctx):
    """An unrounded Digital for a native value, ready to be rounded to ctx."""
    if isinstance(x, numbers.Integral):
        return digital.Digital(m=int(x), exp=0)
    elif isinstance(x, (float, np.floating)):
        return conversion.float_to_digital(x)
    elif isinstance(x, _mpfr_type):
        return gmpmath.mpfr_to_digital(x, sticky=False)
    elif isinstance(x, str):
        return gmpmath.compute_string(x, prec=ctx.p)
    else:
        raise TypeError('cannot convert {} of type {} to {}'
                        .format(repr(x), type(x).__name__, BigFloat.__name__))


class BigFloat(mpnum.MPNum):

    _ctx : evalctx.PrecisionCtx = evalctx.DEFAULT_CTX

    @property
    def ctx(self):
        """The context this value was rounded to.
        Operations between values use an explicitly provided context,
        or the active context if none is provided.
        """
        return self._ctx

    def is_identical_to(self, other):
        if isinstance(other, type(self)):
            return super().is_identical_to(other) and self.ctx == other.ctx
        else:
            return super().is_identical_to(other)

    def __init__(self, x=None, ctx=None, **kwargs):
        ctx = evalctx.resolve_ctx(ctx)

        if x is None or kwargs:
            super().__init__(x=x, **kwargs)
        elif isinstance(x, digital.Digital):
            super().__init__(x=guard.round_digital(x, ctx))
        else:
            super().__init__(x=guard.round_digital(_ingest(x, ctx), ctx))

        self._ctx = ctx

    def __repr__(self):
        return '{}(negative={}, c={}, exp={}, inexact={}, rounded={}, isinf={}, isnan={}, ctx={})'.format(
            type(self).__name__, repr(self._negative), repr(self._c), repr(self._exp),
            repr(self._inexact), repr(self._rounded), repr(self._isinf), repr(self._isnan), repr(self._ctx)
        )

    def __str__(self):
        return str(gmpmath.digital_to_mpfr(self))

    def __float__(self):
        return conversion.digital_to_float(self, float)

    def to_numpy(self, dtype=np.float64):
        """Round to a numpy float16, float32 or float64, with RNE."""
        return conversion.digital_to_float(self, np.dtype(dtype).type)

    def to_decimal(self, digits):
        """Scientific notation, rounded to digits significant decimal digits."""
        if digits < 1:
            raise ValueError('need at least one digit, got {}'.format(repr(digits)))
        if self.isnan:
            return 'nan'
        elif self.isinf:
            if self.negative:
                return '-inf'
            else:
                return 'inf'
        elif self.is_zero():
            if self.negative:
                return '-0'
            else:
                return '0'
        return gmpmath.Dec(self).round(digits).estring

    @classmethod
    def _select_context(cls, *args, ctx=None):
        return evalctx.resolve_ctx(ctx)

    @classmethod
    def _round_to_context(cls, unrounded, ctx=None):
        if ctx is None:
            if isinstance(unrounded, cls):
                ctx = unrounded.ctx
            else:
                raise ValueError('no context specified to round {}'.format(repr(unrounded)))
        return cls(unrounded, ctx=ctx)

    @classmethod
    def fact(cls, n, ctx=None):
        """n! rounded to ctx."""
        ctx = evalctx.resolve_ctx(ctx)
        return cls(factorial.fact_rounded(n, ctx), ctx=ctx)

    # operators use the active context

    def _coerce(self, other):
        if isinstance(other, mpnum.MPNum):
            return other
        else:
            return type(self)(other)

    def __add__(self, other):
        return self.add(self._coerce(other))

    def __radd__(self, other):
        return self._coerce(other).add(self)

    def __sub__(self, other):
        return self.sub(self._coerce(other))

    def __rsub__(self, other):
        return self._coerce(other).sub(self)

    def __mul__(self, other):
        return self.mul(self._coerce(other))

    def __rmul__(self, other):
        return self._coerce(other).mul(self)

    def __truediv__(self, other):
        return self.div(self._coerce(other))

    def __rtruediv__(self, other):
        return self._coerce(other).div(self)

    def __neg__(self):
        return self.neg()

    def __abs__(self):
        return self.fabs()
