import math

import gmpy2 as gmp
import numpy as np
import pytest

from spfloat import BigFloat, Digital, PrecisionCtx, RM, use_ctx


SHORT = PrecisionCtx(p=11)


class TestConstruction:

    def test_native_values(self):
        assert float(BigFloat(0.1)) == 0.1
        assert BigFloat(3) == Digital(c=3, exp=0)
        assert BigFloat(-7).negative
        assert float(BigFloat(np.float32(0.5))) == 0.5
        assert float(BigFloat(gmp.mpfr(0.1))) == 0.1
        assert float(BigFloat('0.1')) == 0.1
        assert float(BigFloat('-2.5e-3')) == -2.5e-3

    def test_special_values(self):
        assert BigFloat(float('nan')).isnan
        assert BigFloat('nan').isnan
        x = BigFloat(float('-inf'))
        assert x.isinf and x.negative
        z = BigFloat(-0.0)
        assert z.is_zero() and z.negative
        assert math.copysign(1.0, float(z)) == -1.0

    def test_rounds_to_the_context(self):
        x = BigFloat(1.0 / 3.0, ctx=SHORT)
        assert x.p == 11
        assert x.inexact
        assert x.ctx is SHORT
        assert BigFloat(2049, ctx=SHORT) == Digital(c=2048, exp=0)
        assert BigFloat(2049, ctx=SHORT.let(rm=RM.RTP)) == Digital(c=2050, exp=0)

    def test_digital_is_rounded(self):
        x = BigFloat(Digital(c=0b1011, exp=0), ctx=PrecisionCtx(p=2))
        assert x == Digital(c=0b11, exp=2)

    def test_bad_input(self):
        with pytest.raises(ValueError):
            BigFloat('one half')
        with pytest.raises(TypeError):
            BigFloat([0.5])

    def test_is_identical_to_compares_contexts(self):
        a = BigFloat(1.0, ctx=SHORT)
        b = BigFloat(1.0, ctx=PrecisionCtx(p=53))
        assert a == b
        assert not a.is_identical_to(b)
        assert a.is_identical_to(BigFloat(1.0, ctx=SHORT))


class TestOutput:

    def test_numpy(self):
        x = BigFloat(0.1)
        assert x.to_numpy(np.float32) == np.float32(0.1)
        assert x.to_numpy() == np.float64(0.1)
        assert np.isnan(BigFloat('nan').to_numpy(np.float16))

    def test_str(self):
        assert gmp.mpfr(str(BigFloat(1.5))) == 1.5
        assert gmp.mpfr(str(BigFloat(-0.1))) == gmp.mpfr(-0.1)

    @pytest.mark.parametrize('x, digits, s', [
        (0.1, 5, '1.0000e-1'),
        (-2.5, 1, '-2e+0'),
        (1234.0, 2, '1.2e+3'),
        (float('nan'), 3, 'nan'),
        (float('inf'), 3, 'inf'),
        (float('-inf'), 3, '-inf'),
        (0.0, 3, '0'),
        (-0.0, 3, '-0'),
    ])
    def test_to_decimal(self, x, digits, s):
        assert BigFloat(x).to_decimal(digits) == s

    def test_to_decimal_needs_digits(self):
        with pytest.raises(ValueError):
            BigFloat(1.0).to_decimal(0)


class TestArithmetic:

    def test_operators(self):
        assert float(BigFloat(1.5) + 2) == 3.5
        assert float(1 - BigFloat(0.25)) == 0.75
        assert float(BigFloat(3) * BigFloat(0.5)) == 1.5
        assert float(1 / BigFloat(3)) == 1 / 3
        assert float(BigFloat(1.0) / 3) == 1 / 3
        assert float(-BigFloat(2.0)) == -2.0
        assert float(abs(BigFloat(-2.0))) == 2.0

    def test_results_are_bigfloats(self):
        assert isinstance(BigFloat(1.0) + 1, BigFloat)
        assert isinstance(BigFloat(1.0).sin(), BigFloat)

    def test_sqrt(self):
        assert float(BigFloat(2.0).sqrt()) == math.sqrt(2.0)

    def test_predicates(self):
        assert BigFloat(1.0).isfinite()
        assert not BigFloat('inf').isfinite()
        assert not BigFloat(0.0).isnormal()
        assert BigFloat(-1.0).signbit()


class TestFunctions:

    def test_exp_and_ln(self):
        assert float(BigFloat(1.0).exp_()) == math.e
        assert float(BigFloat(2.0).ln()) == math.log(2.0)
        assert float(BigFloat(2.0).log()) == math.log(2.0)
        assert float(BigFloat(8.0).log2()) == 3.0
        assert float(BigFloat(1000.0).log10()) == 3.0
        assert float(BigFloat(10.0).exp2()) == 1024.0
        assert float(BigFloat(3.0).exp10()) == 1000.0

    @pytest.mark.parametrize('name', ['sin', 'cos', 'tan', 'acos', 'asin', 'atan', 'sinh', 'cosh', 'tanh',
                                      'sech', 'csch', 'coth', 'asinh', 'atanh'])
    def test_matches_mpfr(self, name):
        x = 0.5
        with gmp.context(precision=53, round=gmp.RoundToNearest):
            expected = float(getattr(gmp, name)(gmp.mpfr(x)))
        assert float(getattr(BigFloat(x), name)()) == expected

    def test_reciprocal_functions(self):
        with gmp.context(precision=53, round=gmp.RoundToNearest):
            x = gmp.mpfr(0.75)
            assert float(BigFloat(0.75).sec()) == float(gmp.sec(x))
            assert float(BigFloat(0.75).csc()) == float(gmp.csc(x))
            assert float(BigFloat(0.75).cot()) == float(gmp.cot(x))

    def test_acosh_and_atan2(self):
        with gmp.context(precision=53, round=gmp.RoundToNearest):
            assert float(BigFloat(1.5).acosh()) == float(gmp.acosh(gmp.mpfr(1.5)))
            assert float(BigFloat(-0.5).atan2(BigFloat(-2.0))) == float(gmp.atan2(gmp.mpfr(-0.5), gmp.mpfr(-2.0)))
        assert BigFloat(0.5).acosh().isnan

    def test_active_context(self):
        with use_ctx(SHORT):
            y = BigFloat(1.0).exp_()
        assert y.ctx is SHORT
        assert float(y) == 2.71875

    def test_explicit_context(self):
        y = BigFloat(1.0).exp_(ctx=SHORT)
        assert y.ctx is SHORT
        assert y.p <= 11

    def test_fact(self):
        assert BigFloat.fact(10) == Digital(c=3628800, exp=0)
        big = BigFloat.fact(25, ctx=PrecisionCtx(p=24))
        assert big.ctx.p == 24
        assert big.p <= 24
        assert big.inexact
