import threading

import gmpy2 as gmp
import pytest

from spfloat.arithmetic import evalctx
from spfloat.arithmetic.evalctx import PrecisionCtx, default_ctx, use_ctx
from spfloat.core.ops import RM
from spfloat.core.utils import DomainError


class TestPrecisionCtx:

    def test_defaults(self):
        ctx = PrecisionCtx()
        assert ctx.p == 53
        assert ctx.rm == RM.RNE
        assert ctx.emax == 2 ** 30 - 2
        assert ctx.emin == -2 ** 30

    def test_default_range_matches_mpfr(self):
        ctx = PrecisionCtx()
        # MPFR's default range, with its significands in [1/2, 1)
        with gmp.context(precision=53, emin=1 - 2 ** 30, emax=2 ** 30 - 1):
            assert gmp.is_finite(gmp.exp2(ctx.emax))
            assert gmp.is_infinite(gmp.exp2(ctx.emax + 1))
            assert not gmp.is_zero(gmp.exp2(ctx.emin))

    def test_let_copies(self):
        ctx = PrecisionCtx(p=100)
        other = ctx.let(rm=RM.RTZ)
        assert other.p == 100 and other.rm == RM.RTZ
        assert ctx.rm == RM.RNE
        assert ctx.let() == ctx

    def test_immutable(self):
        ctx = PrecisionCtx()
        with pytest.raises(AttributeError):
            ctx.p = 10

    def test_invalid(self):
        with pytest.raises(DomainError):
            PrecisionCtx(p=1)
        with pytest.raises(ValueError):
            PrecisionCtx(rm=17)
        with pytest.raises(ValueError):
            PrecisionCtx(emin=10, emax=10)

    def test_hashable(self):
        assert len({PrecisionCtx(p=24), PrecisionCtx(p=24), PrecisionCtx(p=53)}) == 2

    def test_repr(self):
        assert repr(PrecisionCtx(p=24)).startswith('PrecisionCtx(p=24, ')
        assert 'emin' not in repr(PrecisionCtx(p=24))
        assert 'emax=1023' in repr(PrecisionCtx(emin=-1022, emax=1023))


class TestFromProps:

    @pytest.mark.parametrize('precision, p', [
        ('binary16', 11),
        ('binary32', 24),
        ('float', 24),
        ('binary64', 53),
        ('double', 53),
        ('binary80', 64),
        ('binary128', 113),
        ('200', 200),
        (300, 300),
    ])
    def test_precision(self, precision, p):
        assert PrecisionCtx.from_props({'precision': precision}).p == p

    @pytest.mark.parametrize('rounding, rm', [
        ('nearestEven', RM.RNE),
        ('nearestAway', RM.RNA),
        ('toPositive', RM.RTP),
        ('toNegative', RM.RTN),
        ('toZero', RM.RTZ),
        ('awayZero', RM.RAZ),
    ])
    def test_rounding(self, rounding, rm):
        assert PrecisionCtx.from_props({'round': rounding}).rm == rm

    def test_combined(self):
        ctx = PrecisionCtx.from_props({'precision': 'binary64', 'round': 'toZero'})
        assert ctx == PrecisionCtx(p=53, rm=RM.RTZ)

    def test_unknown(self):
        with pytest.raises(ValueError):
            PrecisionCtx.from_props({'precision': 'posit16'})
        with pytest.raises(ValueError):
            PrecisionCtx.from_props({'round': 'sideways'})


class TestActiveContext:

    def test_default(self):
        assert default_ctx() is evalctx.DEFAULT_CTX
        assert evalctx.resolve_ctx() is evalctx.DEFAULT_CTX

    def test_use_ctx_restores(self):
        ctx = PrecisionCtx(p=11)
        with use_ctx(ctx):
            assert default_ctx() is ctx
            with use_ctx(ctx.let(p=24)):
                assert default_ctx().p == 24
            assert default_ctx() is ctx
        assert default_ctx() is evalctx.DEFAULT_CTX

    def test_use_ctx_is_thread_local(self):
        seen = []
        ready = threading.Event()
        done = threading.Event()

        def worker():
            ready.wait()
            seen.append(default_ctx())
            done.set()

        t = threading.Thread(target=worker)
        t.start()
        with use_ctx(PrecisionCtx(p=11)):
            ready.set()
            done.wait()
        t.join()
        assert seen == [evalctx.DEFAULT_CTX]

    def test_resolve_rejects_other_types(self):
        with pytest.raises(TypeError):
            evalctx.resolve_ctx(53)
        with pytest.raises(TypeError):
            with use_ctx('binary64'):
                pass
