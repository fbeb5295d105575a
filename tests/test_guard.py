import logging

import pytest

from spfloat.arithmetic.evalctx import PrecisionCtx
from spfloat.core import digital
from spfloat.core.digital import Digital
from spfloat.core.ops import OP, RM
from spfloat.core.utils import PrecisionError
from spfloat.functions import guard
from spfloat.functions.approx import Approx


CTX = PrecisionCtx(p=8)


class TestCorrectlyRound:

    def test_narrow_interval_rounds_immediately(self):
        calls = []

        def evaluate(wp):
            calls.append(wp)
            # 1/3 with wp bits, error of one unit
            return Approx((1 << wp) // 3, -wp, 1)

        result = guard.correctly_round(evaluate, CTX)
        assert len(calls) == 1
        assert calls[0] == CTX.p + guard.GUARD_BITS
        assert result.p == 8
        assert result == Digital(c=0b10101011, exp=-9)
        assert result.inexact and result.rounded

    def test_hint_raises_first_precision(self):
        calls = []

        def evaluate(wp):
            calls.append(wp)
            return Approx((1 << wp) // 3, -wp, 1)

        guard.correctly_round(evaluate, CTX, hint=10)
        assert calls[0] == CTX.p + guard.GUARD_BITS + 10

    def test_retries_until_resolved(self, caplog):
        calls = []

        def evaluate(wp):
            calls.append(wp)
            if wp < 60:
                raise PrecisionError('not yet')
            return Approx((1 << wp) // 3, -wp, 1)

        with caplog.at_level(logging.DEBUG, logger='spfloat.functions.guard'):
            result = guard.correctly_round(evaluate, CTX, op=OP.sin)
        assert len(calls) > 1
        assert calls == sorted(calls)
        assert result == Digital(c=0b10101011, exp=-9)
        assert any('sin' in record.getMessage() for record in caplog.records)

    def test_wide_interval_retries(self):
        calls = []

        def evaluate(wp):
            calls.append(wp)
            # crosses a rounding boundary until the error is small enough
            err = 1 << max(0, 70 - wp)
            return Approx(((1 << wp) // 3) << 4, -wp - 4, err)

        result = guard.correctly_round(evaluate, CTX)
        assert len(calls) > 1
        assert result == Digital(c=0b10101011, exp=-9)


class TestPerturb:

    @pytest.mark.parametrize('rm, away, expected', [
        (RM.RNE, True, 0b10000000),
        (RM.RNE, False, 0b10000000),
        (RM.RTP, True, 0b10000001),
        (RM.RTZ, True, 0b10000000),
        (RM.RTZ, False, 0b11111111),
        (RM.RAZ, False, 0b10000000),
    ])
    def test_power_of_two(self, rm, away, expected):
        result = guard.perturb(digital.ONE, away, CTX.let(rm=rm))
        assert result.inexact
        if expected == 0b11111111:
            assert result == Digital(c=expected, exp=-8)
        else:
            assert result == Digital(c=expected, exp=-7)

    # 4097 and 4112 have 13 bits, more than p + 2, so the nudge goes below the last bit
    @pytest.mark.parametrize('c, rm, away, expected', [
        (4097, RM.RAZ, False, 4128),
        (4097, RM.RTP, False, 4128),
        (4097, RM.RTZ, True, 4096),
        (4097, RM.RNE, False, 4096),
        (4112, RM.RNE, True, 4128),
        (4112, RM.RNE, False, 4096),
    ])
    def test_leading_term_wider_than_the_context(self, c, rm, away, expected):
        result = guard.perturb(Digital(c=c, exp=0), away, CTX.let(rm=rm))
        assert result.inexact
        assert result == Digital(c=expected, exp=0)

    def test_is_tiny(self):
        x = Digital(c=1, exp=-100)
        assert guard.is_tiny(-300, x, CTX)
        assert not guard.is_tiny(-105, x, CTX)


class TestRange:

    def test_overflow(self):
        ctx = PrecisionCtx(p=8, emin=-10, emax=10)
        assert guard.overflow(True, ctx).is_identical_to(
            Digital(negative=True, isinf=True, inexact=True, rounded=True))
        largest = guard.overflow(False, ctx.let(rm=RM.RTN))
        assert largest == Digital(c=0xff, exp=3)

    def test_underflow(self):
        ctx = PrecisionCtx(p=8, emin=-10, emax=10)
        zero = guard.underflow(True, ctx)
        assert zero.is_zero() and zero.negative
        smallest = guard.underflow(True, ctx.let(rm=RM.RTN))
        assert smallest == Digital(m=-0x80, exp=-17)
        assert smallest.e == ctx.emin

    def test_enforce_range(self):
        ctx = PrecisionCtx(p=8, emin=-10, emax=10)
        assert guard.enforce_range(Digital(c=1, exp=11), ctx).isinf
        assert guard.enforce_range(Digital(c=1, exp=-11), ctx).is_zero()
        x = Digital(c=1, exp=10)
        assert guard.enforce_range(x, ctx) is x

    def test_round_digital(self):
        x = Digital(c=0b1011, exp=0)
        assert guard.round_digital(x, PrecisionCtx(p=2)) == Digital(c=0b11, exp=2)
        assert guard.round_digital(digital.NEG_ZERO, CTX).is_identical_to(digital.NEG_ZERO)
