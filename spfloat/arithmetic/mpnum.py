from abc import abstractmethod
from ..core import digital, gmpmath
from ..core.ops import OP
from .. import functions

class MPNum(digital.Digital):

    # must be implemented in subclasses
    @abstractmethod
    def _select_context(cls, *args, ctx=None):
        raise ValueError('virtual method: unimplemented')

    @abstractmethod
    def _round_to_context(cls, unrounded, ctx=None):
        raise ValueError('virtual method: unimplemented')

    # arithmetic, from the MPFR substrate

    def add(self, other, ctx=None):
        ctx = self._select_context(self, other, ctx=ctx)
        result = gmpmath.compute(OP.add, self, other, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def sub(self, other, ctx=None):
        ctx = self._select_context(self, other, ctx=ctx)
        result = gmpmath.compute(OP.sub, self, other, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def mul(self, other, ctx=None):
        ctx = self._select_context(self, other, ctx=ctx)
        result = gmpmath.compute(OP.mul, self, other, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def div(self, other, ctx=None):
        ctx = self._select_context(self, other, ctx=ctx)
        result = gmpmath.compute(OP.div, self, other, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def sqrt(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = gmpmath.compute(OP.sqrt, self, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def neg(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = gmpmath.compute(OP.neg, self, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    def fabs(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = gmpmath.compute(OP.fabs, self, prec=ctx.p)
        return self._round_to_context(result, ctx=ctx)

    # special functions, correctly rounded by spfloat.functions

    def ln(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.ln(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    log = ln

    def log2(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.log2(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def log10(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.log10(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def log1p(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.log1p(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    # exp is the exponent of a Digital
    def exp_(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.exp(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def exp2(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.exp2(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def exp10(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.exp10(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def expm1(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.expm1(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def sin(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.sin(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def cos(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.cos(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def tan(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.tan(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def sec(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.sec(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def csc(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.csc(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def cot(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.cot(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def acos(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.acos(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def asin(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.asin(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def atan(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.atan(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def atan2(self, other, ctx=None):
        ctx = self._select_context(self, other, ctx=ctx)
        result = functions.atan2(self, other, ctx)
        return self._round_to_context(result, ctx=ctx)

    def sinh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.sinh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def cosh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.cosh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def tanh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.tanh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def sech(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.sech(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def csch(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.csch(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def coth(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.coth(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def asinh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.asinh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def acosh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.acosh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def atanh(self, ctx=None):
        ctx = self._select_context(self, ctx=ctx)
        result = functions.atanh(self, ctx)
        return self._round_to_context(result, ctx=ctx)

    def isfinite(self):
        return not (self.isinf or self.isnan)

    # isinf and isnan are properties

    def isnormal(self):
        return not (
            self.is_zero()
            or self.isinf
            or self.isnan
        )

    def signbit(self):
        return self.negative
